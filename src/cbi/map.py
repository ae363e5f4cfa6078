"""Root node binding one configuration namespace."""

import time
from collections.abc import Iterator, Mapping
from typing import Any, TypeVar

import structlog

from src.cbi.constants import COMPONENT_CBI, SUBMIT_KEY, TEMPLATE_MAP, TYPE_OPTION
from src.cbi.errors import CbiError, StoreReadError
from src.cbi.models import BindContext, ChangeOp, StoreChange
from src.cbi.node import Node
from src.cbi.section import AbstractSection
from src.cbi.snapshot import ConfigSnapshot
from src.cbi.state_machine import MapState, MapStateMachine
from src.observability.metrics import BindMetrics
from src.renderer.protocols import Renderer


logger = structlog.get_logger()

S = TypeVar("S", bound=AbstractSection)


class Map(Node):
    """A map describing one configuration namespace.

    Owns the store session and the snapshot of the namespace. Sections and
    values read through ``get`` and write through ``set``, ``add`` and
    ``delete``; the snapshot is only changed after the store accepted a
    call, so reads never observe a write the store refused.
    """

    template = TEMPLATE_MAP

    def __init__(
        self,
        config: str,
        title: str | None = None,
        description: str | None = None,
        *,
        context: BindContext,
    ) -> None:
        """Initialize the map and read the namespace.

        Args:
            config: Configuration namespace, e.g. ``network``.
            title: Display title.
            description: Display description.
            context: Store session, form values and renderer of the request.

        Raises:
            StoreReadError: If the store cannot supply the namespace.
        """
        super().__init__(title, description)
        self.config = config
        self.context = context
        self.changes: list[StoreChange] = []

        self._store = context.store
        self._metrics = BindMetrics.get_instance()
        self._state_machine = MapStateMachine(config, context.request_id)
        self._log = logger.bind(
            component=COMPONENT_CBI,
            config=config,
            request_id=context.request_id,
        )

        data = self._store.show(config)
        if data is None:
            self._log.error("store_read_failed")
            raise StoreReadError(config)
        self._snapshot = ConfigSnapshot(data)
        self._log.debug("map_created", section_count=len(self._snapshot))

    @property
    def state(self) -> MapState:
        """Get the lifecycle state."""
        return self._state_machine.state

    @property
    def renderer(self) -> Renderer:
        if self.context.renderer is None:
            raise CbiError(f"No renderer configured for map {self.config!r}")
        return self.context.renderer

    @property
    def submitted(self) -> bool:
        """Whether the form carries the overall submit indicator."""
        return self.formvalue(SUBMIT_KEY) is not None

    def formvalue(self, key: str) -> str | None:
        """Return a single submitted value."""
        return self.context.form.value(key)

    def formtable(self, key: str) -> dict[str, str] | None:
        """Return the bulk submission under key."""
        return self.context.form.table(key)

    def section(self, cls: type[S], *args: Any, **kwargs: Any) -> S:
        """Create, append and return a section node.

        Raises:
            TypeError: If cls does not descend from AbstractSection.
        """
        if not (isinstance(cls, type) and issubclass(cls, AbstractSection)):
            raise TypeError("class must be a descendant of AbstractSection")
        obj = cls(self, *args, **kwargs)
        self.append(obj)
        return obj

    # ===== Store access =====

    def get(
        self, section: str, option: str | None = None
    ) -> str | Mapping[str, str] | None:
        """Return a cached option value, or the whole section table.

        Never touches the store.
        """
        return self._snapshot.get(section, option)

    def sections(self) -> Iterator[tuple[str, Mapping[str, str]]]:
        """Yield cached ``(name, table)`` pairs in store order."""
        return self._snapshot.items()

    def set(self, section: str, option: str | None, value: str) -> bool:
        """Write an option, or create/retype a section if option is None.

        Returns:
            True if the store accepted the write.
        """
        if not self._store.set(self.config, section, option, value):
            self._record_failure(ChangeOp.SET, section, option)
            return False

        if option is None:
            self._snapshot.set_type(section, value)
        else:
            self._snapshot.set_option(section, option, value)
        self._record_change(ChangeOp.SET, section, option, value)
        self._metrics.record_write()
        return True

    def add(self, sectiontype: str) -> str | None:
        """Create an anonymous section.

        Returns:
            The generated section name, or None if the store refused.
        """
        name = self._store.add(self.config, sectiontype)
        if not name:
            self._record_failure(ChangeOp.ADD, sectiontype, None)
            return None

        table = self._store.show(self.config, name)
        if table is None:
            table = {TYPE_OPTION: sectiontype}
        self._snapshot.put_section(name, table)
        self._record_change(ChangeOp.ADD, name, None, sectiontype)
        self._metrics.record_write()
        return name

    def delete(self, section: str, option: str | None = None) -> bool:
        """Delete an option, or the whole section if option is None.

        Returns:
            True if the store accepted the delete.
        """
        if not self._store.delete(self.config, section, option):
            self._record_failure(ChangeOp.DELETE, section, option)
            return False

        if option is None:
            self._snapshot.drop_section(section)
        else:
            self._snapshot.drop_option(section, option)
        self._record_change(ChangeOp.DELETE, section, option, None)
        self._metrics.record_delete()
        return True

    def _record_change(
        self, op: ChangeOp, section: str, option: str | None, value: str | None
    ) -> None:
        self.changes.append(
            StoreChange(op=op, section=section, option=option, value=value)
        )
        self._log.debug(
            "store_write", op=op.value, section=section, option=option, value=value
        )

    def _record_failure(self, op: ChangeOp, section: str, option: str | None) -> None:
        self._metrics.record_store_failure()
        self._log.warning(
            "store_write_failed", op=op.value, section=section, option=option
        )

    # ===== Lifecycle =====

    def parse(self, *args: str) -> bool:
        """Apply the form submission to the store.

        Returns:
            True if every store call made during the parse succeeded.
        """
        start_time = time.perf_counter()
        self._state_machine.transition(MapState.MAP_PARSING)

        try:
            ok = super().parse(*args)
        except Exception as e:
            self._state_machine.transition(MapState.MAP_FAILED)
            self._log.error("map_parse_failed", error=f"{type(e).__name__}: {e}")
            raise

        self._state_machine.transition(MapState.MAP_PARSED)
        duration_ms = (time.perf_counter() - start_time) * 1000
        self._metrics.record_parse_duration(duration_ms)
        self._log.info(
            "map_parse_complete",
            ok=ok,
            change_count=len(self.changes),
            invalid_count=len(self.invalid_fields()),
            duration_ms=round(duration_ms, 2),
        )
        return ok

    def render(self, *args: str) -> str:
        """Render the map and every section below it."""
        start_time = time.perf_counter()
        self._state_machine.transition(MapState.MAP_RENDERING)

        try:
            markup = super().render(*args)
        except Exception as e:
            self._state_machine.transition(MapState.MAP_FAILED)
            self._log.error("map_render_failed", error=f"{type(e).__name__}: {e}")
            raise

        self._state_machine.transition(MapState.MAP_RENDERED)
        duration_ms = (time.perf_counter() - start_time) * 1000
        self._metrics.record_render_duration(duration_ms)
        self._log.debug(
            "map_render_complete",
            bytes=len(markup),
            duration_ms=round(duration_ms, 2),
        )
        return markup

    def invalid_fields(self) -> list[tuple[str, str]]:
        """Return ``(section, option)`` pairs flagged invalid by the parse.

        A rejected section name of a TypedSection is reported with the
        section type and an empty option.
        """
        invalid: list[tuple[str, str]] = []
        for section in self.children:
            if not isinstance(section, AbstractSection):
                continue
            if getattr(section, "err_invalid", False):
                invalid.append((section.sectiontype, ""))
            for value in section.values():
                invalid.extend(
                    (name, value.option)
                    for name, flagged in value.tag_invalid.items()
                    if flagged
                )
        return invalid
