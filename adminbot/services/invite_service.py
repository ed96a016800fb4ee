"""Single-use administrator invitations stored in the relational database."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from adminbot.core.exceptions import AlreadyAdminError, InvalidInvitationError
from adminbot.db.session import SessionLocal
from adminbot.interfaces.invite_issuer import InviteIssuer
from adminbot.models.admin import Admin, AdminRole
from adminbot.models.admin_invitation import AdminInvitation

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlInviteIssuer(InviteIssuer):
    """Writes AdminInvitation rows with random URL-safe tokens and redeems them once."""

    def __init__(
        self,
        session_factory: sessionmaker[Session] = SessionLocal,
        ttl: timedelta = timedelta(hours=24),
        token_bytes: int = 32,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.ttl = ttl
        self.token_bytes = token_bytes
        self._clock = clock

    async def create_invitation(self, created_by: int, role: AdminRole) -> str:
        token = secrets.token_urlsafe(self.token_bytes)[:64]
        expires_at = self._clock() + self.ttl
        await asyncio.to_thread(self._insert, token, created_by, role, expires_at)
        logger.info("Created invitation for role %s by operator %s, expires %s", role.name, created_by, expires_at)
        return token

    def _insert(self, token: str, created_by: int, role: AdminRole, expires_at: datetime) -> None:
        with self.session_factory() as db:
            db.add(
                AdminInvitation(
                    invite_token=token,
                    role=role,
                    created_by=created_by,
                    expires_at=expires_at,
                    is_used=False,
                )
            )
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise

    async def activate_invitation(
        self,
        token: str,
        telegram_user_id: int,
        username: str | None = None,
        first_name: str | None = None,
    ) -> AdminRole:
        role = await asyncio.to_thread(self._activate, token, telegram_user_id, username, first_name)
        logger.info("Activated invitation for operator %s with role %s", telegram_user_id, role.name)
        return role

    def _activate(
        self,
        token: str,
        telegram_user_id: int,
        username: str | None,
        first_name: str | None,
    ) -> AdminRole:
        invitation_query = (
            select(AdminInvitation)
            .where(AdminInvitation.invite_token == token)
            .with_for_update()
        )
        admin_query = select(Admin.id).where(Admin.telegram_user_id == telegram_user_id)
        with self.session_factory() as db:
            try:
                invitation = db.execute(invitation_query).scalars().first()
                if invitation is None or not invitation.is_valid(self._clock()):
                    raise InvalidInvitationError("Invitation is unknown, expired or already used.")
                if db.execute(admin_query).first() is not None:
                    raise AlreadyAdminError(f"Operator {telegram_user_id} is already an administrator.")

                admin = Admin(
                    telegram_user_id=telegram_user_id,
                    username=username,
                    first_name=first_name,
                    role=invitation.role,
                    is_active=True,
                )
                db.add(admin)
                db.flush()

                invitation.is_used = True
                invitation.used_at = self._clock()
                invitation.activated_admin_id = admin.id
                role = invitation.role
                db.commit()
            except Exception:
                db.rollback()
                raise
        return role
