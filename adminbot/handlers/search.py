"""Account search with pagination, and the single-account card."""

from __future__ import annotations

import logging
from html import escape
from uuid import UUID

from adminbot.core.constants import AUDIT_VIEW_USER, MIN_SEARCH_QUERY_LENGTH, SEARCH_QUERY_PATTERN
from adminbot.core.exceptions import AccountNotFoundError, StateConflictError
from adminbot.handlers.base import WorkflowHandler
from adminbot.interfaces.account_client import AccountClient
from adminbot.interfaces.audit_log import AuditLogWriter
from adminbot.schemas.accounts import AccountDto, AccountPage
from adminbot.schemas.events import BotReply, EventKind, InboundEvent
from adminbot.services import keyboards, messages
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState
from adminbot.services.state_views import SEARCH_CURRENT_PAGE, SearchView
from adminbot.services.transition_validator import TransitionValidator

logger = logging.getLogger(__name__)


class SearchHandler(WorkflowHandler):
    """Email search: AWAITING_SEARCH_QUERY -> SHOWING_SEARCH_RESULTS (paged) -> IDLE.

    `/user <uuid>` and `search_view:<uuid>` show one account and leave state as is.
    """

    commands = frozenset({"search", "user"})
    namespaces = frozenset({"search_page", "search_view", "search_new", "search_cancel"})
    owned_states = frozenset({BotState.AWAITING_SEARCH_QUERY, BotState.SHOWING_SEARCH_RESULTS})
    cancel_text = messages.SEARCH_CANCELLED

    def __init__(
        self,
        conversation_manager: ConversationManager,
        transition_validator: TransitionValidator,
        account_client: AccountClient,
        audit_log: AuditLogWriter,
        page_size: int = 5,
    ) -> None:
        super().__init__(conversation_manager, transition_validator)
        self.account_client = account_client
        self.audit_log = audit_log
        self.page_size = page_size

    async def handle(self, event: InboundEvent, operator_id: int) -> BotReply:
        if event.kind is EventKind.COMMAND:
            if event.command_keyword() == "user":
                return await self.user_command(event, operator_id)
            return await self.start(event, operator_id)

        namespace, _, argument = (event.action or "").partition(":")
        if namespace == "search_page":
            return await self.change_page(event, operator_id, argument)
        if namespace == "search_view":
            return await self.view_account(event, operator_id, argument, source="search")
        if namespace == "search_new":
            return await self.prompt_new_search(event, operator_id)
        if namespace == "search_cancel":
            return await self.cancel(event, operator_id)
        return self.reply(event, messages.UNKNOWN_ACTION)

    async def start(self, event: InboundEvent, operator_id: int) -> BotReply:
        args = event.command_args()
        if args:
            return await self.process_query(event, operator_id, " ".join(args))
        return await self.prompt_new_search(event, operator_id)

    async def prompt_new_search(self, event: InboundEvent, operator_id: int) -> BotReply:
        await self.transition_validator.validate_and_start(operator_id, BotState.AWAITING_SEARCH_QUERY)
        logger.info("Operator %s entered search mode, awaiting query", operator_id)
        return self.reply(event, messages.SEARCH_PROMPT)

    async def process_query(self, event: InboundEvent, operator_id: int, query: str) -> BotReply:
        """Validate a query, run page 0 and open the results view."""
        query = query.strip()
        if len(query) < MIN_SEARCH_QUERY_LENGTH:
            logger.warning("Search query too short: %r (operator=%s)", query, operator_id)
            return self.reply(event, messages.SEARCH_MIN_LENGTH)
        if not SEARCH_QUERY_PATTERN.match(query):
            logger.warning("Invalid search query format: %r (operator=%s)", query, operator_id)
            return self.reply(event, messages.SEARCH_INVALID_QUERY)

        current = await self.conversation_manager.get_current_tag(operator_id)
        if not self.transition_validator.is_allowed(current, BotState.SHOWING_SEARCH_RESULTS):
            raise StateConflictError(operator_id, current, BotState.SHOWING_SEARCH_RESULTS)

        results = await self.account_client.search_by_email(query, 0, self.page_size)
        if results.is_empty:
            logger.info("No results for query %r (operator=%s)", query, operator_id)
            await self.conversation_manager.reset_to_idle(operator_id)
            return self.reply(event, messages.SEARCH_NO_RESULTS.format(query=escape(query)))

        view = SearchView(
            query=query,
            current_page=0,
            total_pages=max(results.total_pages, 1),
            total_results=max(results.total_elements, len(results.content)),
        )
        await self.transition_validator.validate_and_start(
            operator_id,
            BotState.SHOWING_SEARCH_RESULTS,
            initial=view.to_payload(),
        )
        logger.info(
            "Search completed: query=%r found=%s pages=%s (operator=%s)",
            query,
            view.total_results,
            view.total_pages,
            operator_id,
        )
        return self._results_reply(event, view, results)

    async def change_page(self, event: InboundEvent, operator_id: int, raw_page: str) -> BotReply:
        """Re-query another page; only the current-page entry of the payload changes."""
        state = await self.load_owned_state(operator_id, BotState.SHOWING_SEARCH_RESULTS)
        if state is None:
            return self.stale_reply(event)

        try:
            new_page = int(raw_page)
        except ValueError:
            logger.warning("Invalid page number in callback: %r (operator=%s)", raw_page, operator_id)
            return self.reply(event, messages.SEARCH_INVALID_PAGE)

        view = SearchView.from_state(state)
        if new_page < 0 or new_page >= view.total_pages:
            logger.warning(
                "Invalid page number: %s (total=%s, operator=%s)",
                new_page,
                view.total_pages,
                operator_id,
            )
            return self.reply(event, messages.SEARCH_INVALID_PAGE)

        results = await self.account_client.search_by_email(view.query, new_page, self.page_size)
        await self.conversation_manager.update_data(operator_id, SEARCH_CURRENT_PAGE, new_page)
        logger.info("Page navigation: page=%s/%s (operator=%s)", new_page + 1, view.total_pages, operator_id)

        moved = SearchView(
            query=view.query,
            current_page=new_page,
            total_pages=view.total_pages,
            total_results=view.total_results,
        )
        return self._results_reply(event, moved, results)

    async def user_command(self, event: InboundEvent, operator_id: int) -> BotReply:
        """`/user <uuid>`: the account card without touching conversation state."""
        args = event.command_args()
        if not args:
            return self.reply(event, messages.USER_USAGE)
        return await self.view_account(event, operator_id, args[0], source="command")

    async def view_account(
        self,
        event: InboundEvent,
        operator_id: int,
        raw_user_id: str,
        source: str = "search",
    ) -> BotReply:
        try:
            user_id = UUID(raw_user_id.strip())
        except ValueError:
            return self.reply(event, messages.INVALID_USER_ID)
        try:
            account = await self.account_client.get_account(user_id)
        except AccountNotFoundError:
            return self.reply(event, messages.USER_NOT_FOUND)

        await self.audit_log.log_action(AUDIT_VIEW_USER, operator_id, user_id, {"source": source})
        return self.reply(
            event,
            format_account_details(account),
            keyboards.user_actions_keyboard(account.id, account.is_blocked),
        )

    def _results_reply(self, event: InboundEvent, view: SearchView, results: AccountPage) -> BotReply:
        accounts = results.content[: self.page_size]
        if len(results.content) > self.page_size:
            logger.warning(
                "Account service returned %s accounts instead of %s, trimming",
                len(results.content),
                self.page_size,
            )

        lines = [
            f"🔍 Результаты поиска «{escape(view.query)}»",
            f"Найдено: {view.total_results} · страница {view.current_page + 1} из {view.total_pages}",
            "",
        ]
        for offset, account in enumerate(accounts):
            number = view.current_page * self.page_size + offset + 1
            lines.append(f"<b>{number}.</b> {format_account_card(account)}")

        return self.reply(
            event,
            "\n".join(lines),
            keyboards.search_results_keyboard(accounts, view.current_page, view.total_pages),
        )


def format_account_card(account: AccountDto) -> str:
    name = " ".join(part for part in (account.first_name, account.last_name) if part) or "—"
    status = "🔴 Заблокирован" if account.is_blocked else "🟢 Активен"
    return f"{escape(name)}\n📧 {escape(account.email or '—')}\n🆔 <code>{account.id}</code>\n{status}"


def format_account_details(account: AccountDto) -> str:
    def _value(raw: object | None) -> str:
        return escape(str(raw)) if raw not in (None, "") else "N/A"

    return "\n".join(
        [
            "👤 <b>Информация о пользователе</b>",
            "",
            f"🆔 ID: <code>{account.id}</code>",
            f"📧 Email: <code>{_value(account.email)}</code>",
            f"👤 Имя: {_value(account.first_name)} {_value(account.last_name)}",
            f"📱 Телефон: {_value(account.phone)}",
            f"🌍 Страна: {_value(account.country)}",
            f"🏙️ Город: {_value(account.city)}",
            f"📅 Дата регистрации: {_value(account.reg_date)}",
            f"⏰ Последняя активность: {_value(account.last_online_time)}",
            f"🔒 Заблокирован: {'🔴 Да' if account.is_blocked else '🟢 Нет'}",
        ]
    )
