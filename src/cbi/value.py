"""Value nodes binding one option of a section."""

from typing import TYPE_CHECKING

import structlog

from src.cbi.constants import (
    COMPONENT_CBI,
    DEFAULT_DELIMITER,
    FLAG_DISABLED,
    FLAG_ENABLED,
    TEMPLATE_FLAG,
    TEMPLATE_LIST_VALUE,
    TEMPLATE_MULTI_VALUE,
    TEMPLATE_VALUE,
    VALUE_PREFIX,
    form_key,
)
from src.cbi.node import Node
from src.cbi.state_machine import SubmissionState, classify_submission
from src.cbi.validation import Validator, validate
from src.observability.metrics import BindMetrics
from src.renderer.protocols import Renderer


if TYPE_CHECKING:
    from src.cbi.map import Map

logger = structlog.get_logger()


class AbstractValue(Node):
    """An abstract value type.

    Attributes:
        option: Bound option name.
        default: Value written when the option is created.
        valid: Callable or collection the submitted value must pass.
        depends: Option -> value pairs of which one must hold (not evaluated).
        size: Display size of the input.
        rmempty: Remove the option when submitted empty.
        optional: Hide the value until the option exists or is requested.
        tag_invalid: Section name -> whether the submission was rejected.
    """

    def __init__(
        self,
        map: "Map",  # noqa: A002
        option: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(title, description)
        self.option = option
        self.map = map
        self.config = map.config
        self.tag_invalid: dict[str, bool] = {}

        self.valid: Validator | None = None
        self.depends: dict[str, str] | None = None
        self.default: str | None = None
        self.size: int | None = None
        self.rmempty = False
        self.optional = False

        self._metrics = BindMetrics.get_instance()
        self._log = logger.bind(
            component=COMPONENT_CBI,
            config=map.config,
            request_id=map.context.request_id,
            option=option,
        )

    @property
    def renderer(self) -> Renderer:
        return self.map.renderer

    def cbid(self, section: str) -> str:
        """Return the form key of this option in section."""
        return form_key(VALUE_PREFIX, self.config, section, self.option)

    def formvalue(self, section: str) -> str | None:
        """Return the value submitted for this option in section."""
        return self.map.formvalue(self.cbid(section))

    def parse(self, *args: str) -> bool:
        """Validate and write back the submission for one section.

        Returns:
            False if a store call failed.
        """
        (section,) = args
        fvalue = self.formvalue(section)
        state = classify_submission(fvalue, self.map.submitted)

        if state is SubmissionState.NONEMPTY_SUBMISSION:
            return self._parse_value(section, fvalue or "")
        if state is SubmissionState.EMPTY_SUBMISSION:
            return self._parse_empty(section)
        return True

    def _parse_value(self, section: str, fvalue: str) -> bool:
        value = self.validate(fvalue)
        if value is None:
            self._mark_invalid(section, fvalue)
            return True
        if value != self.ucivalue(section):
            return self.write(section, value)
        return True

    def _parse_empty(self, section: str) -> bool:
        if self.rmempty or self.optional:
            return self.remove(section)
        self._mark_invalid(section, "")
        return True

    def _mark_invalid(self, section: str, fvalue: str) -> None:
        self.tag_invalid[section] = True
        self._metrics.record_validation_failure()
        self._log.info("value_invalid", section=section, submitted=fvalue)

    def render(self, *args: str) -> str:
        """Render if this value is mandatory or present in the section."""
        (section,) = args
        if self.optional and self.ucivalue(section) is None:
            return ""
        return self.renderer.render(
            self.template, {"node": self, "section": section}
        )

    def ucivalue(self, section: str) -> str | None:
        """Return the cached value of this option in section."""
        value = self.map.get(section, self.option)
        return value if isinstance(value, str) else None

    def validate(self, value: str) -> str | None:
        """Return the accepted value or None."""
        return validate(value, self.valid)

    def write(self, section: str, value: str) -> bool:
        """Write the option through the map."""
        return self.map.set(section, self.option, value)

    def remove(self, section: str) -> bool:
        """Remove the option through the map; absent options are left alone."""
        if self.ucivalue(section) is None:
            return True
        return self.map.delete(section, self.option)


class Value(AbstractValue):
    """A one-line value.

    Attributes:
        maxlength: Maximum length of the value.
        isnumber: The value must be a plain decimal number.
        isinteger: The value must be a signed or unsigned run of digits.
    """

    template = TEMPLATE_VALUE

    def __init__(
        self,
        map: "Map",  # noqa: A002
        option: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(map, option, title, description)
        self.maxlength: int | None = None
        self.isnumber = False
        self.isinteger = False

    def validate(self, value: str) -> str | None:
        if self.maxlength is not None and len(value) > self.maxlength:
            return None
        return validate(value, self.valid, self.isnumber, self.isinteger)


class Flag(AbstractValue):
    """A flag being enabled or disabled."""

    template = TEMPLATE_FLAG

    def __init__(
        self,
        map: "Map",  # noqa: A002
        option: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(map, option, title, description)
        self.enabled = FLAG_ENABLED
        self.disabled = FLAG_DISABLED

    def parse(self, *args: str) -> bool:
        # Only presence matters: a checked box is enabled, a missing one disabled
        (section,) = args
        self.default = self.enabled
        fvalue = self.formvalue(section)
        if fvalue is None and not self.map.submitted:
            return True

        value = self.enabled if fvalue is not None else self.disabled
        if value == self.enabled or not (self.optional or self.rmempty):
            if value != self.ucivalue(section):
                return self.write(section, value)
            return True
        return self.remove(section)

    def is_enabled(self, section: str) -> bool:
        """Check whether the flag is set in section."""
        return self.ucivalue(section) == self.enabled


class ListValue(AbstractValue):
    """A one-line value predefined in a list.

    Attributes:
        widget: The widget used to draw the choice (select, radio).
    """

    template = TEMPLATE_LIST_VALUE

    def __init__(
        self,
        map: "Map",  # noqa: A002
        option: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(map, option, title, description)
        self.keylist: list[str] = []
        self.vallist: list[str] = []
        self.size = 1
        self.widget = "select"

    def add_value(self, key: object, label: object | None = None) -> None:
        """Register a choice, labelled with its key unless a label is given."""
        self.keylist.append(str(key))
        self.vallist.append(str(key if label is None else label))

    def choices(self) -> list[tuple[str, str]]:
        """Return ``(key, label)`` pairs in registration order."""
        return list(zip(self.keylist, self.vallist, strict=True))

    def validate(self, value: str) -> str | None:
        return value if value in self.keylist else None


class MultiValue(AbstractValue):
    """Multiple delimited values.

    Attributes:
        widget: The widget used to draw the choices (select, checkbox).
        delimiter: The delimiter separating the values in the store.
    """

    template = TEMPLATE_MULTI_VALUE

    def __init__(
        self,
        map: "Map",  # noqa: A002
        option: str,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(map, option, title, description)
        self.keylist: list[str] = []
        self.vallist: list[str] = []
        self.widget = "checkbox"
        self.delimiter = DEFAULT_DELIMITER

    def add_value(self, key: object, label: object | None = None) -> None:
        """Register a choice, labelled with its key unless a label is given."""
        self.keylist.append(str(key))
        self.vallist.append(str(key if label is None else label))

    def choices(self) -> list[tuple[str, str]]:
        """Return ``(key, label)`` pairs in registration order."""
        return list(zip(self.keylist, self.vallist, strict=True))

    def valuelist(self, section: str) -> list[str]:
        """Return the stored values of section as a list."""
        value = self.ucivalue(section)
        if value is None:
            return []
        return [v for v in value.split(self.delimiter) if v]

    def parse(self, *args: str) -> bool:
        (section,) = args
        fvalue = self.formvalue(section)
        if fvalue and self.validate(fvalue) is None:
            # Nothing registered was selected: handled like an empty submission
            if self.map.submitted:
                return self._parse_empty(section)
            self._mark_invalid(section, fvalue)
            return True
        return super().parse(*args)

    def validate(self, value: str) -> str | None:
        # Only "\n" separates tokens; a trailing "\r" from CRLF forms is dropped
        lines = (line.removesuffix("\r") for line in value.split("\n"))
        tokens = [t for t in lines if t and t in self.keylist]
        if not tokens:
            return None
        return self.delimiter.join(tokens)
