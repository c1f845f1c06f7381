import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def normalize_text(text: str) -> str:
    """Lowercased, accent-free, single-spaced form used for matching."""
    return collapse_whitespace(strip_diacritics(text.lower()))


def humanize(value: object) -> str:
    # "WORKING_STUDENT" -> "Working student"
    text = collapse_whitespace(re.sub(r"[_-]+", " ", str(value)))
    return text[:1].upper() + text[1:].lower()
