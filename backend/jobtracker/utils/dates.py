import re
from datetime import date, datetime

_IMMEDIATELY = re.compile(r"ab\s*sofort|immediately", re.IGNORECASE)
IMMEDIATE_LABEL = "ab sofort"


def _parse_date(text: str) -> date | None:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d.%m.%Y").date()
    except ValueError:
        return None


def format_start_date(raw: str | None, today: date | None = None) -> str | None:
    """Display form of a start date: "ab sofort" for past or immediate starts, DD.MM.YYYY otherwise."""
    if not raw:
        return None
    text = raw.strip()
    if not text:
        return None
    if _IMMEDIATELY.search(text):
        return IMMEDIATE_LABEL

    start = _parse_date(text)
    if start is None:
        return text

    today = today or date.today()
    if start <= today:
        return IMMEDIATE_LABEL
    return start.strftime("%d.%m.%Y")
