"""Domain models package."""

from adminbot.models.admin import Admin, AdminRole
from adminbot.models.admin_invitation import AdminInvitation
from adminbot.models.audit_log import AuditLog

__all__ = [
    "Admin",
    "AdminRole",
    "AdminInvitation",
    "AuditLog",
]
