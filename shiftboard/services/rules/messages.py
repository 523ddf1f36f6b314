"""
User-facing text for issue and error codes. Hebrew is the product language;
English is kept for logs and API consumers that ask for it.
"""

import logging
from typing import Optional

from .types import Issue

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "he"

DAY_NAMES = {
    "he": ["ראשון", "שני", "שלישי", "רביעי", "חמישי", "שישי", "שבת"],
    "en": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
}

MESSAGES = {
    "he": {
        # validation issues
        "min_mornings": "חובה לרשום לפחות {required} בקרים (רשמת {actual})",
        "min_noons": "חובה לרשום לפחות צהריים {required} (רשמת {actual})",
        "minimum_only_night": "מי שרושם מינימום בלבד (2 בקרים + 1 צהריים) אינו יכול לרשום לילות",
        "minimum_only_premium": "מי שרושם מינימום בלבד אינו יכול להשתבץ במשמרות איכות (שישי/שבת לילה)",
        "minimum_only_rotation": "מי שרושם מינימום בלבד אינו יכול להשתבץ בשישי בוקר (משמרת סבב)",
        "morning_evening_same_day": "לא ניתן לרשום גם בוקר וגם ערב ביום {day_name}",
        "duplicate_selection": "בחרת את אותה משמרת פעמיים באותו יום",
        "shift_not_selectable": "המשמרת {shift_id} ביום {day_name} משובצת על ידי מנהל בלבד",
        # errors
        "error": "שגיאה",
        "bad_request": "בקשה לא תקינה",
        "missing_fields": "חסרים שדות",
        "note_required": "הוסף הערה לדחייה",
        "validation_failed": "הבקשה אינה עומדת בכללי ההגשה",
        "approve_invalid_request": "לא ניתן לאשר בקשה שאינה עומדת בכללי ההגשה",
        "not_authenticated": "לא מחובר",
        "invalid_credentials": "אימייל או סיסמה שגויים",
        "token_outdated": "ההרשאות שלך השתנו, יש להתחבר מחדש",
        "forbidden": "אין הרשאה",
        "manager_required": "הרשאת מנהל נדרשת",
        "not_swap_target": "אין הרשאה",
        "not_found": "לא נמצא",
        "request_not_found": "הבקשה לא נמצאה",
        "swap_not_found": "בקשת ההחלפה לא נמצאה",
        "user_not_found": "המשתמש לא קיים",
        "conflict": "הפעולה מתנגשת במצב הנוכחי",
        "request_locked": "לא ניתן לערוך בקשה שאושרה או נדחתה",
        "invalid_transition": "פעולה לא חוקית",
        "submission_closed": "עבר הדדליין להגשה",
        "stale_write": "הנתונים השתנו בינתיים, יש לרענן ולנסות שוב",
        "storage_error": "שגיאה בשרת",
        "swap_with_self": "לא ניתן לבקש החלפה עם עצמך",
        "invalid_week_start": "תאריך תחילת שבוע לא חוקי",
        "invalid_day": "יום לא חוקי",
        "unknown_shift": "משמרת לא קיימת",
        "invalid_role": "תפקיד לא חוקי",
        "cannot_delete_self": "לא ניתן למחוק את עצמך",
        "email_taken": "האימייל כבר רשום במערכת",
        "password_too_short": "סיסמה חייבת להכיל לפחות {min_length} תווים",
        "partial_save": "חלק מהשיבוצים לא נשמרו",
    },
    "en": {
        "min_mornings": "At least {required} morning shifts are required (you chose {actual})",
        "min_noons": "At least {required} noon shift is required (you chose {actual})",
        "minimum_only_night": "Minimum-only registrants (2 mornings + 1 noon) cannot take night shifts",
        "minimum_only_premium": "Minimum-only registrants cannot take premium shifts (Friday/Saturday night)",
        "minimum_only_rotation": "Minimum-only registrants cannot take the Friday morning rotation shift",
        "morning_evening_same_day": "Cannot take both a morning and an evening shift on {day_name}",
        "duplicate_selection": "The same shift was chosen twice on the same day",
        "shift_not_selectable": "Shift {shift_id} on {day_name} is assigned by a manager only",
        "error": "Error",
        "bad_request": "Bad request",
        "missing_fields": "Missing fields",
        "note_required": "A note is required to reject",
        "validation_failed": "The request does not meet the submission rules",
        "approve_invalid_request": "Cannot approve a request that fails the submission rules",
        "not_authenticated": "Not logged in",
        "invalid_credentials": "Invalid credentials",
        "token_outdated": "Your role changed, please log in again",
        "forbidden": "Not allowed",
        "manager_required": "Manager access required",
        "not_swap_target": "Only the swap target can answer this swap",
        "not_found": "Not found",
        "request_not_found": "Request not found",
        "swap_not_found": "Swap request not found",
        "user_not_found": "User not found",
        "conflict": "The action conflicts with the current state",
        "request_locked": "Cannot edit a request that was approved or rejected",
        "invalid_transition": "Invalid action for the current status",
        "submission_closed": "The submission deadline has passed",
        "stale_write": "The data changed meanwhile, refresh and try again",
        "storage_error": "Server error",
        "swap_with_self": "Cannot request a swap with yourself",
        "invalid_week_start": "Invalid week start date",
        "invalid_day": "Invalid day",
        "unknown_shift": "Unknown shift",
        "invalid_role": "Invalid role",
        "cannot_delete_self": "You cannot delete yourself",
        "email_taken": "Email already registered",
        "password_too_short": "Password must be at least {min_length} characters",
        "partial_save": "Some assignments were not saved",
    },
}


def _templates(locale: Optional[str]) -> dict:
    return MESSAGES.get(locale or DEFAULT_LOCALE, MESSAGES[DEFAULT_LOCALE])


def render_error(code: str, params: Optional[dict] = None, locale: Optional[str] = None) -> str:
    templates = _templates(locale)
    template = templates.get(code)
    if template is None:
        logger.warning(f"No message for code {code!r}")
        template = templates["error"]

    values = dict(params or {})
    day = values.get("day")
    if isinstance(day, int) and 0 <= day < 7:
        values.setdefault("day_name", DAY_NAMES.get(locale or DEFAULT_LOCALE, DAY_NAMES[DEFAULT_LOCALE])[day])

    try:
        return template.format(**values)
    except (KeyError, IndexError):
        logger.warning(f"Missing params for message {code!r}: {values}")
        return template


def render_issue(issue: Issue, locale: Optional[str] = None) -> str:
    return render_error(issue.code, issue.params, locale)
