"""
Script-based language and text-direction detection.

Used to tag the result summary so the front end can render right-to-left
tests correctly.
"""

import re
from typing import Optional

_RTL_CHARS = re.compile(
    r"[\u0590-\u05FF"   # Hebrew
    r"\u0600-\u06FF"    # Arabic
    r"\u0750-\u077F"    # Arabic Supplement
    r"\u08A0-\u08FF"    # Arabic Extended-A
    r"\uFB50-\uFDFF"    # Arabic Presentation Forms-A
    r"\uFE70-\uFEFF"    # Arabic Presentation Forms-B
    r"\u200F\u202E]"    # RTL mark / override
)
_LATIN_CHARS = re.compile(r"[A-Za-z]")

# Checked in order; the first script found wins.
_SCRIPT_LANGUAGES = [
    (re.compile(r"[\u0590-\u05FF]"), "he"),
    (re.compile(r"[\u0600-\u06FF]"), "ar"),
    (re.compile(r"[\u0400-\u04FF]"), "ru"),
    (re.compile(r"[\u4E00-\u9FFF]"), "zh"),
    (re.compile(r"[\u3040-\u309F\u30A0-\u30FF]"), "ja"),
    (re.compile(r"[\uAC00-\uD7AF]"), "ko"),
]


def detect_rtl(text: str) -> bool:
    """Check if the text contains any right-to-left characters."""
    if not text:
        return False
    return bool(_RTL_CHARS.search(text))


def detect_language_direction(text: str) -> str:
    """
    Detect the dominant direction of the text.

    Mixed content counts as RTL once RTL characters exceed 30% of the
    Latin letter count.
    """
    if not detect_rtl(text):
        return "ltr"

    rtl_count = len(_RTL_CHARS.findall(text))
    ltr_count = len(_LATIN_CHARS.findall(text))

    return "rtl" if rtl_count > ltr_count * 0.3 else "ltr"


def detect_language(text: str) -> Optional[str]:
    """Guess an ISO language code from the scripts used; English by default."""
    if not text:
        return None

    for pattern, code in _SCRIPT_LANGUAGES:
        if pattern.search(text):
            return code

    return "en"

