"""Inbound events and outbound replies of the admin bot engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class EventKind(str, Enum):
    COMMAND = "command"
    FREE_TEXT = "free_text"
    CALLBACK_ACTION = "callback_action"


class InboundEvent(BaseModel):
    """Platform-neutral event: a command, a plain message or a button tap."""

    operator_id: int = Field(..., description="Platform-issued operator id", examples=[123456789])
    kind: EventKind
    text: str | None = Field(default=None, examples=["/search jo@x.io"])
    action: str | None = Field(default=None, examples=["search_page:1"])
    username: str | None = Field(default=None, description="Sender's platform username, if any")
    first_name: str | None = Field(default=None, description="Sender's display first name, if any")

    @model_validator(mode="after")
    def _check_body(self) -> InboundEvent:
        if self.kind is EventKind.CALLBACK_ACTION:
            if not self.action:
                raise ValueError("Callback events require 'action'.")
        elif self.text is None or not self.text.strip():
            raise ValueError(f"{self.kind.value} events require non-empty 'text'.")
        return self

    def command_keyword(self) -> str:
        """Return the lowercased command keyword without '/' or '@botname'."""
        head = (self.text or "").strip().split(maxsplit=1)[0]
        return head.lstrip("/").split("@", 1)[0].lower()

    def command_args(self) -> list[str]:
        parts = (self.text or "").strip().split()
        return parts[1:]


class KeyboardButton(BaseModel):
    text: str
    action: str


class BotReply(BaseModel):
    """Rendering-ready result; turning it into platform messages happens elsewhere."""

    text: str
    keyboard: list[list[KeyboardButton]] | None = None
    is_edit: bool = False

    @classmethod
    def silent(cls) -> BotReply:
        """Reply that carries nothing to render (e.g. a tap on a placeholder button)."""
        return cls(text="")
