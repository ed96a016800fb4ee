"""Typed views over the payload keys each workflow owns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from adminbot.core.exceptions import PayloadValueError
from adminbot.models.admin import AdminRole
from adminbot.services.conversation_state import ConversationState

SEARCH_QUERY = "searchQuery"
SEARCH_CURRENT_PAGE = "currentPage"
SEARCH_TOTAL_PAGES = "totalPages"
SEARCH_TOTAL_RESULTS = "totalResults"

BAN_TARGET_USER_ID = "targetUserId"
BAN_TARGET_EMAIL = "targetEmail"
BAN_REASON = "banReason"

INVITE_ADMIN_ROLE = "inviteAdminRole"


@dataclass(frozen=True, slots=True)
class SearchView:
    """Pagination cursor of the search workflow."""

    query: str
    current_page: int
    total_pages: int
    total_results: int

    @classmethod
    def from_state(cls, state: ConversationState) -> SearchView:
        return cls(
            query=state.require(SEARCH_QUERY).as_str(),
            current_page=state.require(SEARCH_CURRENT_PAGE).as_int(),
            total_pages=state.require(SEARCH_TOTAL_PAGES).as_int(),
            total_results=state.require(SEARCH_TOTAL_RESULTS).as_int(),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            SEARCH_QUERY: self.query,
            SEARCH_CURRENT_PAGE: self.current_page,
            SEARCH_TOTAL_PAGES: self.total_pages,
            SEARCH_TOTAL_RESULTS: self.total_results,
        }


@dataclass(frozen=True, slots=True)
class BanView:
    """Target and (once chosen) reason of the ban workflow."""

    target_user_id: UUID
    target_email: str
    reason: str | None = None

    @classmethod
    def from_state(cls, state: ConversationState) -> BanView:
        raw_target = state.require(BAN_TARGET_USER_ID).as_str()
        try:
            target_user_id = UUID(raw_target)
        except ValueError as exc:
            raise PayloadValueError(f"Stored ban target '{raw_target}' is not a UUID.") from exc
        reason_entry = state.get(BAN_REASON)
        return cls(
            target_user_id=target_user_id,
            target_email=state.require(BAN_TARGET_EMAIL).as_str(),
            reason=reason_entry.as_str() if reason_entry is not None else None,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            BAN_TARGET_USER_ID: str(self.target_user_id),
            BAN_TARGET_EMAIL: self.target_email,
        }
        if self.reason is not None:
            payload[BAN_REASON] = self.reason
        return payload


@dataclass(frozen=True, slots=True)
class InviteView:
    """Role picked in the invite workflow."""

    role: AdminRole

    @classmethod
    def from_state(cls, state: ConversationState) -> InviteView:
        raw_role = state.require(INVITE_ADMIN_ROLE).as_str()
        try:
            return cls(role=AdminRole.from_name(raw_role))
        except ValueError as exc:
            raise PayloadValueError(str(exc)) from exc

    def to_payload(self) -> dict[str, Any]:
        return {INVITE_ADMIN_ROLE: self.role.name}
