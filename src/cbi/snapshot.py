"""In-memory mirror of one configuration namespace."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from src.cbi.constants import TYPE_OPTION


class ConfigSnapshot:
    """Ordered section -> option table cache of one namespace.

    Readers only ever receive read-only views. The owning map applies a
    mutation here after the store has confirmed it, which keeps the
    snapshot identical to what the store holds.
    """

    def __init__(self, data: Mapping[str, Mapping[str, str]]) -> None:
        self._sections: dict[str, dict[str, str]] = {
            name: dict(table) for name, table in data.items()
        }

    def __contains__(self, section: object) -> bool:
        return section in self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[str]:
        return iter(self._sections)

    def get(
        self, section: str, option: str | None = None
    ) -> str | Mapping[str, str] | None:
        """Return an option value, or a read-only view of the section."""
        table = self._sections.get(section)
        if table is None:
            return None
        if option is None:
            return MappingProxyType(table)
        return table.get(option)

    def items(self) -> Iterator[tuple[str, Mapping[str, str]]]:
        """Yield ``(name, view)`` pairs in store order."""
        for name, table in self._sections.items():
            yield name, MappingProxyType(table)

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Return a detached copy of the cached namespace."""
        return {name: dict(table) for name, table in self._sections.items()}

    def set_option(self, section: str, option: str, value: str) -> None:
        self._sections.setdefault(section, {})[option] = value

    def set_type(self, section: str, sectiontype: str) -> None:
        self._sections.setdefault(section, {})[TYPE_OPTION] = sectiontype

    def put_section(self, section: str, table: Mapping[str, str]) -> None:
        self._sections[section] = dict(table)

    def drop_option(self, section: str, option: str) -> None:
        table = self._sections.get(section)
        if table is not None:
            table.pop(option, None)

    def drop_section(self, section: str) -> None:
        self._sections.pop(section, None)
