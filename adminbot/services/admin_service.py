"""Operator privilege lookup against the admins table."""

from __future__ import annotations

import asyncio

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from adminbot.db.session import SessionLocal
from adminbot.interfaces.privilege_lookup import PrivilegeLookup
from adminbot.models.admin import Admin, AdminRole


class SqlPrivilegeLookup(PrivilegeLookup):
    def __init__(self, session_factory: sessionmaker[Session] = SessionLocal) -> None:
        self.session_factory = session_factory

    async def get_role(self, operator_id: int) -> AdminRole | None:
        return await asyncio.to_thread(self._select_role, operator_id)

    def _select_role(self, operator_id: int) -> AdminRole | None:
        query = select(Admin.role).where(
            Admin.telegram_user_id == operator_id,
            Admin.is_active.is_(True),
        )
        with self.session_factory() as db:
            return db.execute(query).scalars().first()
