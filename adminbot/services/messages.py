"""User-facing texts shared across handlers."""

HELP = (
    "👋 <b>Панель администратора</b>\n\n"
    "/search &lt;email&gt; — поиск пользователей\n"
    "/user &lt;id&gt; — информация о пользователе\n"
    "/ban &lt;id&gt; — заблокировать пользователя\n"
    "/unban &lt;id&gt; — разблокировать пользователя\n"
    "/addadmin — пригласить администратора\n"
    "/cancel — отменить текущее действие"
)
MAIN_MENU = "🏠 <b>Главное меню</b>\n\nВыберите действие:"

GENERIC_ERROR = "❌ Произошла ошибка. Текущее действие отменено, попробуйте ещё раз."
UNKNOWN_ACTION = "⚠️ Неизвестное действие."
UNKNOWN_STATE = "⚠️ Неизвестное состояние диалога. Отправьте /cancel."
STALE_WORKFLOW = "⚠️ Это действие сейчас недоступно. Завершите текущий сценарий или отправьте /cancel."
USE_BUTTONS = "⚠️ Пожалуйста, используйте кнопки или отправьте /cancel для отмены."
CANCELLED = "✅ Действие отменено."
INVALID_USER_ID = "⚠️ Неверный формат ID пользователя."
USER_NOT_FOUND = "⚠️ Пользователь не найден."

SEARCH_PROMPT = "🔍 Введите email (или его часть) для поиска. Минимум 3 символа."
SEARCH_MIN_LENGTH = "⚠️ Минимальная длина запроса — 3 символа."
SEARCH_INVALID_QUERY = "⚠️ Запрос может содержать только латинские буквы, цифры и символы @ . _ -"
SEARCH_NO_RESULTS = "🤷 По запросу «{query}» ничего не найдено."
SEARCH_INVALID_PAGE = "⚠️ Некорректный номер страницы."
SEARCH_CANCELLED = "✅ Поиск завершён."

BAN_USAGE = "ℹ️ Использование: /ban &lt;id пользователя&gt; [причина]"
UNBAN_USAGE = "ℹ️ Использование: /unban &lt;id пользователя&gt;"
BAN_ALREADY_BLOCKED = "⚠️ Пользователь уже заблокирован."
BAN_NOT_BLOCKED = "⚠️ Пользователь не заблокирован."
BAN_CHOOSE_REASON = "Выберите причину блокировки или отправьте её текстом:"
BAN_REASON_LIMIT = "⚠️ Причина должна содержать от 1 до 500 символов."
BAN_CANCELLED = "✅ Блокировка отменена. Пользователь не был заблокирован."

ADMIN_SELECT_ROLE = "👤 Выберите роль для нового администратора:"
ADMIN_SUPER_ONLY = "⛔ Команда доступна только роли SUPER_ADMIN."
ADMIN_ROLE_TOO_HIGH = "⛔ Роль {role} назначить нельзя: доступны только роли ниже вашей ({own})."
ADMIN_INVALID_ROLE = "⚠️ Неизвестная роль."
ADMIN_INVITE_CANCELLED = "✅ Создание приглашения отменено."
BAN_TARGET = "🚫 <b>Блокировка пользователя</b>\n\n📧 {email}\n🆔 <code>{user_id}</code>\n\n" + BAN_CHOOSE_REASON
BAN_CONFIRM = (
    "⚠️ <b>Подтвердите блокировку</b>\n\n"
    "📧 {email}\n🆔 <code>{user_id}</code>\n📝 Причина: {reason}"
)
BAN_DONE = "✅ Пользователь {email} заблокирован.\n📝 Причина: {reason}"
UNBAN_DONE = "✅ Пользователь {email} разблокирован."

ADMIN_CONFIRM = "👤 Создать приглашение для роли <b>{role}</b>?\nСсылка будет действительна {hours} ч."
ADMIN_INVITE_CREATED = (
    "✅ <b>Приглашение создано</b>\n\n"
    "Роль: <b>{role}</b>\n"
    "Ссылка (одноразовая, действует {hours} ч.):\n{link}"
)

USER_USAGE = "ℹ️ Использование: /user &lt;id пользователя&gt;"

INVITE_ACTIVATED = (
    "🎉 <b>Регистрация завершена</b>\n\n"
    "Ваша роль: <b>{role}</b>\n\n" + HELP
)
INVITE_INVALID = "❌ <b>Ошибка активации</b>\n\nПриглашение недействительно, истекло или уже использовано."
INVITE_ALREADY_ADMIN = "⚠️ Вы уже зарегистрированы как администратор."
