"""Single-use invitations for new administrators."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import BigInteger, Boolean, Enum, Index, String, TIMESTAMP, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from adminbot.db.base import Base
from adminbot.models.admin import AdminRole


class AdminInvitation(Base):
    """Invite token that lets a candidate register with a preassigned role."""

    __tablename__ = "admin_invitations"
    __table_args__ = (
        Index("uq_admin_invitations_invite_token", "invite_token", unique=True),
        Index("ix_admin_invitations_created_by", "created_by"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invite_token: Mapped[str] = mapped_column(String(64), nullable=False)
    role: Mapped[AdminRole] = mapped_column(Enum(AdminRole, native_enum=False, length=32), nullable=False)
    created_by: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    activated_admin_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[Any] = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    used_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    def is_valid(self, now: datetime | None = None) -> bool:
        current = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return not self.is_used and expires_at > current
