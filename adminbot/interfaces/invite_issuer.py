"""Interface contract for administrator invitations."""

from abc import ABC, abstractmethod

from adminbot.models.admin import AdminRole


class InviteIssuer(ABC):
    """Creates and redeems single-use invitations in durable storage."""

    @abstractmethod
    async def create_invitation(self, created_by: int, role: AdminRole) -> str:
        """Store a new invitation and return its token."""
        raise NotImplementedError

    @abstractmethod
    async def activate_invitation(
        self,
        token: str,
        telegram_user_id: int,
        username: str | None = None,
        first_name: str | None = None,
    ) -> AdminRole:
        """Register the operator with the invited role and mark the token used.

        Raises InvalidInvitationError for unknown, expired or used tokens and
        AlreadyAdminError when the operator is already registered.
        """
        raise NotImplementedError
