"""Gujarati script detection by Unicode block membership (U+0A80-U+0AFF)."""

import re
from typing import Literal

TARGET_LANGUAGE_THRESHOLD = 50
MIXED_SCRIPT_RANGE = (5, 95)

_TARGET_CHAR = re.compile(r"[\u0A80-\u0AFF]")
_TARGET_RUN = re.compile(r"[\u0A80-\u0AFF\s]+")
_LATIN_LETTER = re.compile(r"[a-zA-Z]")


def contains_target_script(text: str | None) -> bool:
    if not text or not text.strip():
        return False
    return _TARGET_CHAR.search(text) is not None


def target_script_percentage(text: str | None) -> int:
    """Share of characters (whitespace included) inside the Gujarati block, 0-100."""
    if not text or not text.strip():
        return 0
    count = len(_TARGET_CHAR.findall(text))
    return round(count / len(text) * 100)


def detect_language(text: str | None) -> Literal["gujarati", "english", "mixed"]:
    percentage = target_script_percentage(text)
    if percentage > TARGET_LANGUAGE_THRESHOLD:
        return "gujarati"
    if percentage > 0:
        return "mixed"
    return "english"


def is_target_language(text: str | None) -> bool:
    """True only when the text is predominantly Gujarati, not merely containing some."""
    return detect_language(text) == "gujarati"


def is_mixed_script(text: str | None) -> bool:
    low, high = MIXED_SCRIPT_RANGE
    percentage = target_script_percentage(text)
    return low < percentage < high


def extract_latin_words(text: str | None) -> list[str]:
    if not text:
        return []
    stripped = _TARGET_CHAR.sub(" ", text)
    return [word for word in stripped.split() if _LATIN_LETTER.search(word)]


def extract_target_script_words(text: str | None) -> list[str]:
    if not text:
        return []
    runs = _TARGET_RUN.findall(text)
    return [word for word in " ".join(runs).split() if _TARGET_CHAR.search(word)]
