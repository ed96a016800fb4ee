"""Inline keyboard specs attached to bot replies."""

from uuid import UUID

from adminbot.core.constants import BAN_REASONS
from adminbot.models.admin import AdminRole
from adminbot.schemas.accounts import AccountDto
from adminbot.schemas.events import KeyboardButton

Keyboard = list[list[KeyboardButton]]


def _button(text: str, action: str) -> KeyboardButton:
    return KeyboardButton(text=text, action=action)


def main_menu_keyboard() -> Keyboard:
    return [[_button("🔍 Поиск пользователей", "search_new")]]


def ban_reasons_keyboard() -> Keyboard:
    rows = [[_button(label, f"ban_reason:{code}")] for code, label in BAN_REASONS.items()]
    rows.append([_button("❌ Отмена", "ban_cancel")])
    return rows


def confirmation_keyboard(confirm_action: str, cancel_action: str) -> Keyboard:
    return [[_button("✅ Подтвердить", confirm_action), _button("❌ Отмена", cancel_action)]]


def user_actions_keyboard(user_id: UUID, is_blocked: bool) -> Keyboard:
    if is_blocked:
        moderation = _button("✅ Разблокировать", f"unblock:{user_id}")
    else:
        moderation = _button("🚫 Заблокировать", f"block:{user_id}")
    return [[moderation], [_button("🏠 Главное меню", "main_menu")]]


def search_results_keyboard(accounts: list[AccountDto], current_page: int, total_pages: int) -> Keyboard:
    rows: Keyboard = []
    for account in accounts:
        label = account.email or str(account.id)
        if account.is_blocked:
            moderation = _button("✅", f"search_unban:{account.id}")
        else:
            moderation = _button("🚫", f"search_ban:{account.id}")
        rows.append([_button(f"👁 {label}", f"search_view:{account.id}"), moderation])

    navigation: list[KeyboardButton] = []
    if current_page > 0:
        navigation.append(_button("◀️", f"search_page:{current_page - 1}"))
    navigation.append(_button(f"{current_page + 1}/{total_pages}", "noop"))
    if current_page < total_pages - 1:
        navigation.append(_button("▶️", f"search_page:{current_page + 1}"))
    rows.append(navigation)

    rows.append([_button("🔍 Новый поиск", "search_new"), _button("❌ Закрыть", "search_cancel")])
    return rows


def role_selection_keyboard(roles: list[AdminRole]) -> Keyboard:
    rows = [[_button(role.name, f"add_admin:role:{role.name}")] for role in roles]
    rows.append([_button("❌ Отмена", "add_admin:cancel")])
    return rows
