"""Shared bot constants."""

import re

MIN_SEARCH_QUERY_LENGTH = 3
SEARCH_QUERY_PATTERN = re.compile(r"^[a-zA-Z0-9@._-]+$")

MIN_BAN_REASON_LENGTH = 1
MAX_BAN_REASON_LENGTH = 500

# Reason codes carried by "ban_reason:<code>" buttons.
BAN_REASONS: dict[str, str] = {
    "spam": "Спам",
    "harassment": "Harassment",
    "bot": "Bot/Fake аккаунт",
    "violation": "Нарушение правил сообщества",
}

INVITE_DEEP_LINK_PREFIX = "invite_"

AUDIT_BLOCK_USER = "BLOCK_USER"
AUDIT_UNBLOCK_USER = "UNBLOCK_USER"
AUDIT_VIEW_USER = "VIEW_USER"
AUDIT_GENERATE_INVITE_LINK = "GENERATE_INVITE_LINK"
AUDIT_UNAUTHORIZED_ADDADMIN_ATTEMPT = "UNAUTHORIZED_ADDADMIN_ATTEMPT"
AUDIT_ACTIVATE_INVITE = "ACTIVATE_INVITE"
