"""Data models for the binding tree."""

import uuid
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict

from src.cbi.form import EMPTY_FORM, FormValues
from src.renderer.protocols import Renderer
from src.uci.protocols import ConfigStore


class ChangeOp(str, Enum):
    """Kind of store mutation."""

    SET = "set"
    ADD = "add"
    DELETE = "delete"


class StoreChange(BaseModel):
    """One successful write-through performed by a map.

    Attributes:
        op: Kind of mutation.
        section: Affected section name.
        option: Affected option, None for section-level changes.
        value: Written value (section type for section-level sets and adds).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    op: ChangeOp
    section: str
    option: str | None = None
    value: str | None = None


@dataclass
class BindContext:
    """Collaborators of one request.

    Attributes:
        store: Store session the map reads and writes through.
        form: Submitted form values.
        renderer: Renderer for node templates, None for parse-only use.
        request_id: Identifier bound to every log line of the request.
    """

    store: ConfigStore
    form: FormValues = EMPTY_FORM
    renderer: Renderer | None = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
