"""Form-value providers read by the binding tree."""

from collections.abc import Iterable, Mapping
from typing import Protocol


class FormValues(Protocol):
    """Read access to a decoded form submission.

    Keys are dotted names such as ``cbid.network.lan.proto``.
    """

    def value(self, key: str) -> str | None:
        """Return the single value submitted under key."""
        ...

    def table(self, key: str) -> dict[str, str] | None:
        """Return the values submitted under ``key.<name>`` keyed by name."""
        ...


class FormData:
    """Form values backed by a flat mapping of dotted keys.

    Multi-valued fields (a list of strings) are joined with newlines, the
    way multi-select submissions reach the values.
    """

    def __init__(self, fields: Mapping[str, object] | None = None) -> None:
        self._fields: dict[str, str] = {}
        for key, raw in (fields or {}).items():
            if raw is None:
                continue
            if isinstance(raw, str) or not isinstance(raw, Iterable):
                self._fields[key] = str(raw)
            else:
                self._fields[key] = "\n".join(str(v) for v in raw)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def value(self, key: str) -> str | None:
        return self._fields.get(key)

    def table(self, key: str) -> dict[str, str] | None:
        prefix = key + "."
        result = {
            name[len(prefix) :]: raw
            for name, raw in self._fields.items()
            if name.startswith(prefix) and "." not in name[len(prefix) :]
        }
        return result or None


EMPTY_FORM = FormData()
