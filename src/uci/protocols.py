"""Protocol for section/option configuration stores."""

from collections.abc import Mapping
from typing import Protocol


# Section name -> option name -> value, the reserved ".type" option
# carrying the section type.
ConfigData = dict[str, dict[str, str]]


class ConfigStore(Protocol):
    """Session on a section/option configuration store.

    Every namespace ("config") holds ordered sections; every section has a
    type stored under the reserved ``.type`` option.
    """

    def show(
        self, config: str, section: str | None = None
    ) -> Mapping[str, Mapping[str, str]] | Mapping[str, str] | None:
        """Return a namespace, or one of its sections, or None if unreadable."""
        ...

    def get(self, config: str, section: str, option: str | None = None) -> str | None:
        """Return an option value, or the section type if option is None."""
        ...

    def set(
        self, config: str, section: str, option: str | None, value: str
    ) -> bool:
        """Set an option, or create/retype a section if option is None."""
        ...

    def add(self, config: str, sectiontype: str) -> str | None:
        """Create an anonymous section and return its generated name."""
        ...

    def delete(self, config: str, section: str, option: str | None = None) -> bool:
        """Delete an option, or the whole section if option is None."""
        ...
