"""Database-backed audit log writer."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from adminbot.db.session import SessionLocal
from adminbot.interfaces.audit_log import AuditLogWriter
from adminbot.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


class SqlAuditLogWriter(AuditLogWriter):
    """Appends AuditLog rows; the blocking ORM work runs in a worker thread."""

    def __init__(self, session_factory: sessionmaker[Session] = SessionLocal) -> None:
        self.session_factory = session_factory

    async def log_action(
        self,
        action_type: str,
        operator_id: int,
        target_user_id: UUID | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        await asyncio.to_thread(self._insert, action_type, operator_id, target_user_id, details or {})
        logger.info(
            "Audit log: action=%s operator=%s target=%s",
            action_type,
            operator_id,
            target_user_id,
        )

    def _insert(
        self,
        action_type: str,
        operator_id: int,
        target_user_id: UUID | None,
        details: dict[str, Any],
    ) -> None:
        with self.session_factory() as db:
            db.add(
                AuditLog(
                    admin_id=operator_id,
                    action_type=action_type,
                    target_user_id=target_user_id,
                    details=details,
                )
            )
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
