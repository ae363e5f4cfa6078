"""Configuration bind interface.

Binds sections and options of a configuration store to a tree of typed,
validating nodes:
- Map, the root owning the store session and the cached namespace
- NamedSection and TypedSection grouping values
- Value, Flag, ListValue and MultiValue binding single options
"""

from src.cbi.errors import CbiError, InvalidMapError, LoadError, StoreReadError
from src.cbi.form import FormData, FormValues
from src.cbi.loader import load
from src.cbi.map import Map
from src.cbi.models import BindContext, ChangeOp, StoreChange
from src.cbi.node import Node
from src.cbi.section import AbstractSection, NamedSection, TypedSection
from src.cbi.snapshot import ConfigSnapshot
from src.cbi.state_machine import (
    MapState,
    MapStateError,
    MapStateMachine,
    SectionPresence,
    SubmissionState,
)
from src.cbi.validation import Validator, validate
from src.cbi.value import AbstractValue, Flag, ListValue, MultiValue, Value


__all__ = [
    # Errors
    "CbiError",
    "InvalidMapError",
    "LoadError",
    "StoreReadError",
    # Form values
    "FormData",
    "FormValues",
    # Models
    "BindContext",
    "ChangeOp",
    "StoreChange",
    # Nodes
    "AbstractSection",
    "AbstractValue",
    "ConfigSnapshot",
    "Flag",
    "ListValue",
    "Map",
    "MultiValue",
    "NamedSection",
    "Node",
    "TypedSection",
    "Value",
    # State machine
    "MapState",
    "MapStateError",
    "MapStateMachine",
    "SectionPresence",
    "SubmissionState",
    # Loading and validation
    "Validator",
    "load",
    "validate",
]
