"""Per-operator conversation state and its typed payload entries."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from adminbot.core.exceptions import PayloadValueError


class BotState(str, Enum):
    """Closed set of workflow positions an operator can be in."""

    IDLE = "IDLE"
    AWAITING_SEARCH_QUERY = "AWAITING_SEARCH_QUERY"
    SHOWING_SEARCH_RESULTS = "SHOWING_SEARCH_RESULTS"
    AWAITING_ADMIN_ROLE = "AWAITING_ADMIN_ROLE"
    CONFIRMING_ADMIN_CREATION = "CONFIRMING_ADMIN_CREATION"
    AWAITING_BAN_REASON = "AWAITING_BAN_REASON"
    CONFIRMING_BAN = "CONFIRMING_BAN"


class _PayloadEntry(BaseModel):
    """Common conversions; each variant overrides the ones it supports."""

    def as_str(self) -> str:
        return str(getattr(self, "value"))

    def as_int(self) -> int:
        raise self._mismatch("int")

    def as_float(self) -> float:
        raise self._mismatch("float")

    def as_bool(self) -> bool:
        raise self._mismatch("bool")

    def _mismatch(self, wanted: str) -> PayloadValueError:
        return PayloadValueError(f"Cannot read {getattr(self, 'kind')} payload value as {wanted}.")


class StrValue(_PayloadEntry):
    kind: Literal["str"] = "str"
    value: str

    def as_str(self) -> str:
        return self.value


class IntValue(_PayloadEntry):
    kind: Literal["int"] = "int"
    value: int

    def as_int(self) -> int:
        return self.value

    def as_float(self) -> float:
        return float(self.value)


class FloatValue(_PayloadEntry):
    kind: Literal["float"] = "float"
    value: float

    def as_float(self) -> float:
        return self.value

    def as_int(self) -> int:
        if not self.value.is_integer():
            raise PayloadValueError(f"Float payload value {self.value} is not integral.")
        return int(self.value)


class BoolValue(_PayloadEntry):
    kind: Literal["bool"] = "bool"
    value: bool

    def as_bool(self) -> bool:
        return self.value

    def as_str(self) -> str:
        return "true" if self.value else "false"


PayloadValue = Annotated[
    Union[StrValue, IntValue, FloatValue, BoolValue],
    Field(discriminator="kind"),
]


def payload_value(raw: Any) -> StrValue | IntValue | FloatValue | BoolValue:
    """Wrap a plain scalar into its tagged payload variant."""
    # bool must be checked before int: True is an int in Python.
    if isinstance(raw, bool):
        return BoolValue(value=raw)
    if isinstance(raw, int):
        return IntValue(value=raw)
    if isinstance(raw, float):
        return FloatValue(value=raw)
    if isinstance(raw, str):
        return StrValue(value=raw)
    raise PayloadValueError(f"Unsupported payload type: {type(raw).__name__}")


class ConversationState(BaseModel):
    """Ephemeral record of where an operator is inside a multi-step workflow."""

    state: BotState = BotState.IDLE
    payload: dict[str, PayloadValue] = Field(default_factory=dict)
    version: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def idle(cls) -> ConversationState:
        """Return a fresh, unpersisted IDLE state."""
        return cls(state=BotState.IDLE)

    @property
    def is_idle(self) -> bool:
        return self.state == BotState.IDLE

    def put(self, key: str, raw: Any) -> None:
        self.payload[key] = payload_value(raw)

    def get(self, key: str) -> StrValue | IntValue | FloatValue | BoolValue | None:
        return self.payload.get(key)

    def require(self, key: str) -> StrValue | IntValue | FloatValue | BoolValue:
        """Return the entry stored under key or raise PayloadValueError."""
        entry = self.payload.get(key)
        if entry is None:
            raise PayloadValueError(f"Payload key '{key}' is missing in state {self.state.value}.")
        return entry

    def clear_payload(self) -> None:
        self.payload.clear()

    def increment_version(self) -> None:
        self.version += 1

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str | bytes) -> ConversationState:
        return cls.model_validate_json(raw)
