"""Section nodes: named and typed groups of values."""

from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from src.cbi.constants import (
    COMPONENT_CBI,
    CREATE_NAMED_PREFIX,
    CREATE_TYPED_PREFIX,
    OPTIONAL_PREFIX,
    REMOVE_NAMED_PREFIX,
    REMOVE_TYPED_PREFIX,
    RESERVED_PREFIX,
    TEMPLATE_NAMED_SECTION,
    TEMPLATE_TYPED_SECTION,
    TYPE_OPTION,
    VALUE_PREFIX,
    form_key,
)
from src.cbi.node import Node
from src.cbi.state_machine import SectionPresence
from src.cbi.validation import Validator, validate
from src.cbi.value import AbstractValue, Value
from src.observability.metrics import BindMetrics
from src.renderer.protocols import Renderer


if TYPE_CHECKING:
    from collections.abc import Mapping

    from src.cbi.map import Map

logger = structlog.get_logger()

V = TypeVar("V", bound=AbstractValue)


class AbstractSection(Node):
    """A section node owning value children.

    Attributes:
        sectiontype: Store type tag of the bound sections.
        addremove: Whether the user may create and delete sections.
        optional: Whether absent optional values are offered for addition.
        dynamic: Whether unmodeled options become ad-hoc values.
        optionals: Section name -> values offered for addition there.
    """

    def __init__(
        self,
        map: "Map",  # noqa: A002
        sectiontype: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(title, description)
        self.sectiontype = sectiontype
        self.map = map
        self.config = map.config
        self.optionals: dict[str, list[AbstractValue]] = {}

        self.addremove = True
        self.optional = True
        self.dynamic = False

        self._metrics = BindMetrics.get_instance()
        self._log = logger.bind(
            component=COMPONENT_CBI,
            config=map.config,
            request_id=map.context.request_id,
            sectiontype=sectiontype,
        )

    @property
    def renderer(self) -> Renderer:
        return self.map.renderer

    def option(self, cls: type[V], *args: Any, **kwargs: Any) -> V:
        """Create, append and return a value node.

        Raises:
            TypeError: If cls does not descend from AbstractValue.
        """
        if not (isinstance(cls, type) and issubclass(cls, AbstractValue)):
            raise TypeError("class must be a descendant of AbstractValue")
        obj = cls(self.map, *args, **kwargs)
        self.append(obj)
        return obj

    def values(self) -> list[AbstractValue]:
        """Return the value children in declaration order."""
        return [c for c in self.children if isinstance(c, AbstractValue)]

    def has_option(self, option: str) -> bool:
        """Check whether a child is bound to option."""
        return any(value.option == option for value in self.values())

    def parse_optionals(self, section: str) -> bool:
        """Apply a request to add an optional value, collect the others.

        Returns:
            False if writing the requested value's default failed.
        """
        if not self.optional:
            return True

        ok = True
        field = self.map.formvalue(form_key(OPTIONAL_PREFIX, self.config, section))
        offered: list[AbstractValue] = []
        for value in self.values():
            if not value.optional or value.ucivalue(section) is not None:
                continue
            if field == value.option:
                default = value.default if value.default is not None else ""
                ok = self.map.set(section, value.option, default) and ok
                field = None
            else:
                offered.append(value)
        self.optionals[section] = offered

        if field and self.dynamic and not self.has_option(field):
            self.add_dynamic(field)
        return ok

    def offered(self, section: str) -> list[AbstractValue]:
        """Return the optional values that may be added to section."""
        if section in self.optionals:
            return self.optionals[section]
        if not self.optional:
            return []
        return [
            value
            for value in self.values()
            if value.optional and value.ucivalue(section) is None
        ]

    def add_dynamic(self, field: str, optional: bool = False) -> Value:
        """Append a plain Value bound to an unmodeled option."""
        obj = self.option(Value, field, field)
        obj.optional = optional
        self._metrics.record_dynamic_field()
        self._log.debug("dynamic_field_added", option=field, optional=optional)
        return obj

    def parse_dynamic(self, section: str) -> None:
        """Create values for options of the section no child models.

        Looks at both the cached section and the bulk form submission, so a
        field added by the user in this request is picked up as well.
        """
        if not self.dynamic:
            return

        keys = dict.fromkeys(self.ucivalue(section) or {})
        form = self.map.formtable(form_key(VALUE_PREFIX, self.config, section))
        if form:
            keys.update(dict.fromkeys(form))

        for key in keys:
            if key.startswith(RESERVED_PREFIX) or self.has_option(key):
                continue
            self.add_dynamic(key, optional=True)

    def ucivalue(self, section: str) -> "Mapping[str, str] | None":
        """Return the cached table of a section."""
        table = self.map.get(section)
        return None if isinstance(table, str) else table


class NamedSection(AbstractSection):
    """A fixed configuration section defined by its name."""

    template = TEMPLATE_NAMED_SECTION

    def __init__(
        self,
        map: "Map",  # noqa: A002
        section: str,
        sectiontype: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(map, sectiontype, title, description)
        self.section = section
        self.addremove = False

    def presence(self) -> SectionPresence:
        """Return whether the section exists in the snapshot."""
        if self.ucivalue(self.section) is None:
            return SectionPresence.ABSENT
        return SectionPresence.PRESENT

    def parse(self, *args: str) -> bool:
        ok = True

        if self.addremove:
            if self.presence() is SectionPresence.PRESENT:
                key = form_key(REMOVE_NAMED_PREFIX, self.config, self.section)
                if self.map.formvalue(key) is not None:
                    if self.remove():
                        return True
                    ok = False
            else:
                key = form_key(CREATE_NAMED_PREFIX, self.config, self.section)
                if self.map.formvalue(key) is not None:
                    ok = self.create() and ok

        if self.presence() is SectionPresence.PRESENT:
            self.parse_dynamic(self.section)
            ok = super().parse(self.section) and ok
            ok = self.parse_optionals(self.section) and ok
        return ok

    def render(self, *args: str) -> str:
        return self.renderer.render(
            self.template, {"node": self, "section": self.section}
        )

    def remove(self) -> bool:
        """Delete the section."""
        if not self.map.delete(self.section):
            return False
        self._metrics.record_section_removed()
        self._log.info("section_removed", section=self.section)
        return True

    def create(self) -> bool:
        """Create the section and write the children's defaults."""
        if not self.map.set(self.section, None, self.sectiontype):
            return False
        self._metrics.record_section_created()
        self._log.info("section_created", section=self.section)

        ok = True
        for value in self.values():
            if value.default is not None:
                ok = value.write(self.section, value.default) and ok
        return ok


class TypedSection(AbstractSection):
    """A set of configuration sections sharing one type.

    Attributes:
        anonymous: Create sections with store-generated names.
        valid: Filter for names of sections to create or remove.
        scope: Filter for names of sections shown and edited.
        err_invalid: Whether a requested section name was rejected.
    """

    template = TEMPLATE_TYPED_SECTION

    def __init__(
        self,
        map: "Map",  # noqa: A002
        sectiontype: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(map, sectiontype, title, description)
        self.anonymous = False
        self.valid: Validator | None = None
        self.scope: Validator | None = None
        self.err_invalid = False

    def create(self, name: str | None = None) -> bool:
        """Create a named or anonymous section and write child defaults."""
        if name is None:
            name = self.map.add(self.sectiontype)
            if name is None:
                return False
        elif not self.map.set(name, None, self.sectiontype):
            return False
        self._metrics.record_section_created()
        self._log.info("section_created", section=name, anonymous=self.anonymous)

        ok = True
        for value in self.values():
            if value.default is not None:
                ok = self.map.set(name, value.option, value.default) and ok
        return ok

    def remove(self, name: str) -> bool:
        """Delete a section."""
        if not self.map.delete(name):
            return False
        self._metrics.record_section_removed()
        self._log.info("section_removed", section=name)
        return True

    def parse(self, *args: str) -> bool:
        ok = True
        if self.addremove:
            ok = self._parse_create() and ok
            ok = self._parse_remove() and ok

        for name in self.ucisections():
            self.parse_dynamic(name)
            ok = super().parse(name) and ok
            ok = self.parse_optionals(name) and ok
        return ok

    def _parse_create(self) -> bool:
        key = form_key(CREATE_TYPED_PREFIX, self.config, self.sectiontype)
        name = self.map.formvalue(key)
        if name is None:
            return True

        if self.anonymous:
            return self.create() if name else True

        accepted = validate(name, self.valid)
        if accepted is None:
            self.err_invalid = True
            self._metrics.record_validation_failure()
            self._log.info("section_name_invalid", section=name)
            return True
        if accepted:
            return self.create(accepted)
        return True

    def _parse_remove(self) -> bool:
        # The removal table is shared by every typed section of the config,
        # so only sections of this type are ours to delete. Names failing
        # valid are skipped without flagging, unlike creation.
        names = self.map.formtable(form_key(REMOVE_TYPED_PREFIX, self.config)) or {}
        ok = True
        for name in names:
            if self.map.get(name, TYPE_OPTION) != self.sectiontype:
                continue
            if validate(name, self.valid) is not None:
                ok = self.remove(name) and ok
        return ok

    def ucisections(self) -> "dict[str, Mapping[str, str]]":
        """Return cached sections of this type whose name passes scope."""
        return {
            name: table
            for name, table in self.map.sections()
            if table.get(TYPE_OPTION) == self.sectiontype
            and validate(name, self.scope) is not None
        }
