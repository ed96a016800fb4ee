"""Domain exceptions raised by the conversation engine and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adminbot.services.conversation_state import BotState


class AdminBotError(Exception):
    """Base class for every error raised inside adminbot."""


class StateConflictError(AdminBotError):
    """A requested state change is not present in the transition table."""

    def __init__(self, operator_id: int, current: BotState, requested: BotState) -> None:
        self.operator_id = operator_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Transition not allowed: {current.value} -> {requested.value} for operator {operator_id}"
        )


class PayloadValueError(AdminBotError):
    """A payload entry is missing or cannot be read as the requested type."""


class CollaboratorError(AdminBotError):
    """A downstream service failed or could not be reached."""


class AccountNotFoundError(CollaboratorError):
    """The account service has no record for the requested id."""


class InsufficientPrivilegeError(AdminBotError):
    """The operator's role does not allow the requested action."""


class InvitationError(AdminBotError):
    """An invitation token cannot be redeemed."""


class InvalidInvitationError(InvitationError):
    """The token is unknown, expired or already used."""


class AlreadyAdminError(InvitationError):
    """The redeeming operator is already registered as an administrator."""
