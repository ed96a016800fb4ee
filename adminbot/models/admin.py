"""Administrator model and privilege tiers."""

from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import BigInteger, Boolean, Enum, Index, Integer, String, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column

from adminbot.db.base import Base


class AdminRole(enum.Enum):
    """Privilege tiers, totally ordered by level."""

    SUPER_ADMIN = 4
    ADMIN = 3
    SENIOR_MODERATOR = 2
    MODERATOR = 1

    @property
    def level(self) -> int:
        return self.value

    def has_permission(self, required: AdminRole) -> bool:
        return self.level >= required.level

    def can_assign(self, target: AdminRole) -> bool:
        """Roles may only be handed out strictly below the assigner's own tier."""
        return self.level > target.level

    def assignable_roles(self) -> list[AdminRole]:
        return [role for role in AdminRole if self.can_assign(role)]

    @classmethod
    def from_name(cls, name: str) -> AdminRole:
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown admin role '{name}'.") from exc


class Admin(Base):
    """Operator allowed to talk to the admin bot."""

    __tablename__ = "admins"
    __table_args__ = (
        Index("ix_admins_telegram_user_id", "telegram_user_id", unique=True),
    )

    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    telegram_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    username: Mapped[str | None] = mapped_column(String(64), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    role: Mapped[AdminRole] = mapped_column(
        Enum(AdminRole, native_enum=False, length=32),
        nullable=False,
        default=AdminRole.MODERATOR,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[Any] = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
