"""Section/option configuration store backends.

This package provides the store session the binding tree writes through:
- ConfigStore protocol describing show/get/set/add/delete
- MemoryStore kept in memory and persisted as YAML
- UciCliStore driving the uci command line tool
"""

from src.uci.cli import UciCliStore, parse_show_output
from src.uci.errors import StoreSeedError, UciBinaryNotFoundError, UciStoreError
from src.uci.memory import MemoryStore
from src.uci.protocols import ConfigData, ConfigStore


__all__ = [
    # Errors
    "StoreSeedError",
    "UciBinaryNotFoundError",
    "UciStoreError",
    # Protocols
    "ConfigData",
    "ConfigStore",
    # Backends
    "MemoryStore",
    "UciCliStore",
    "parse_show_output",
]
