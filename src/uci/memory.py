"""In-memory configuration store with YAML persistence."""

import copy
import re
import zlib
from collections.abc import Mapping
from pathlib import Path

import structlog
import yaml

from src.uci.errors import StoreSeedError
from src.uci.protocols import ConfigData


logger = structlog.get_logger()

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
TYPE_OPTION = ".type"


class MemoryStore:
    """Configuration store kept in ordered dictionaries.

    Follows the uci naming rules: namespace, section and option names must
    be made of letters, digits and underscores. Anonymous sections get a
    generated ``cfgXXXXXX`` name derived from their position and type.
    """

    def __init__(
        self, data: Mapping[str, Mapping[str, Mapping[str, object]]] | None = None
    ) -> None:
        """Initialize the store.

        Args:
            data: Optional namespace -> section -> option -> value seed.

        Raises:
            StoreSeedError: If the seed violates naming rules or lacks types.
        """
        self._configs: dict[str, ConfigData] = {}
        self._log = logger.bind(component="uci", backend="memory")
        for config, sections in (data or {}).items():
            self._configs[config] = _coerce_sections(config, sections)

    @classmethod
    def load(cls, path: Path | str) -> "MemoryStore":
        """Create a store from a YAML file.

        The file maps namespace -> section -> option -> value; each section
        must carry a ``.type`` entry. A missing file yields an empty store.

        Raises:
            StoreSeedError: If the YAML document has the wrong shape.
            yaml.YAMLError: If YAML parsing fails.
        """
        path = Path(path)
        if not path.exists():
            logger.info("store_seed_missing", path=str(path))
            return cls()

        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise StoreSeedError("top level must be a mapping", path=str(path))
        try:
            return cls(data)
        except StoreSeedError as e:
            raise StoreSeedError(str(e), path=str(path)) from e

    def dump(self, path: Path | str) -> None:
        """Write every namespace to a YAML file, preserving order."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump(
            self.to_dict(), sort_keys=False, allow_unicode=True
        )
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_text(content, encoding="utf-8")
        temp_path.rename(path)
        self._log.debug("store_dumped", path=str(path), configs=len(self._configs))

    def to_dict(self) -> dict[str, ConfigData]:
        """Return a deep copy of all namespaces."""
        return copy.deepcopy(self._configs)

    def show(
        self, config: str, section: str | None = None
    ) -> ConfigData | dict[str, str] | None:
        sections = self._configs.get(config)
        if sections is None:
            return None
        if section is None:
            return copy.deepcopy(sections)
        table = sections.get(section)
        return dict(table) if table is not None else None

    def get(self, config: str, section: str, option: str | None = None) -> str | None:
        table = self._configs.get(config, {}).get(section)
        if table is None:
            return None
        return table.get(TYPE_OPTION if option is None else option)

    def set(
        self, config: str, section: str, option: str | None, value: str
    ) -> bool:
        if not (_valid_name(config) and _valid_name(section)):
            self._log.debug("store_set_rejected", config=config, section=section)
            return False

        sections = self._configs.setdefault(config, {})
        if option is None:
            if not _valid_name(value):
                return False
            sections.setdefault(section, {})[TYPE_OPTION] = value
            return True

        table = sections.get(section)
        if table is None or not _valid_name(option):
            self._log.debug(
                "store_set_rejected", config=config, section=section, option=option
            )
            return False
        table[option] = str(value)
        return True

    def add(self, config: str, sectiontype: str) -> str | None:
        if not (_valid_name(config) and _valid_name(sectiontype)):
            return None

        sections = self._configs.setdefault(config, {})
        checksum = zlib.crc32(sectiontype.encode("utf-8")) & 0xFFFF
        index = len(sections)
        name = f"cfg{index:02x}{checksum:04x}"
        while name in sections:
            index += 1
            name = f"cfg{index:02x}{checksum:04x}"

        sections[name] = {TYPE_OPTION: sectiontype}
        return name

    def delete(self, config: str, section: str, option: str | None = None) -> bool:
        sections = self._configs.get(config)
        if sections is None or section not in sections:
            return False
        if option is None:
            del sections[section]
            return True
        if option == TYPE_OPTION or option not in sections[section]:
            return False
        del sections[section][option]
        return True


def _valid_name(name: str | None) -> bool:
    return isinstance(name, str) and NAME_PATTERN.match(name) is not None


def _coerce_sections(
    config: str, sections: Mapping[str, Mapping[str, object]] | None
) -> ConfigData:
    """Validate one namespace of seed data and stringify its values."""
    if not _valid_name(config):
        raise StoreSeedError(f"invalid config name: {config!r}")
    if sections is None:
        return {}
    if not isinstance(sections, Mapping):
        raise StoreSeedError(f"config {config!r} must map sections")

    result: ConfigData = {}
    for name, table in sections.items():
        if not _valid_name(name) or not isinstance(table, Mapping):
            raise StoreSeedError(f"invalid section {config}.{name}")
        if not _valid_name(table.get(TYPE_OPTION)):
            raise StoreSeedError(f"section {config}.{name} has no valid .type")
        result[name] = {str(k): _stringify(v) for k, v in table.items()}
    return result


def _stringify(value: object) -> str:
    # YAML turns 1 / yes into int / bool; the store only knows strings
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, list):
        return " ".join(_stringify(v) for v in value)
    return str(value)
