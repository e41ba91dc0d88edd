from __future__ import annotations

import re
from collections.abc import Iterable

from .keywords import ENTRY_LEVEL_KEYWORDS, ENTRY_LEVEL_RANGE, NOT_SPECIFIED

# Most specific first; the bare "N years" form is the loosest and goes last.
_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "3-5 years of experience", "5+ Jahre Erfahrung"
    re.compile(
        r"(\d+)\+?\s*(?:-\s*(\d+))?\s*(?:years?|yrs?|jahre)\s*(?:of)?\s*(?:experience|erfahrung)",
        re.IGNORECASE,
    ),
    # "experience: at least 2 years", "Erfahrung von 3-4 Jahren"
    re.compile(
        r"(?:experience|erfahrung).*?(\d+)\+?\s*(?:-\s*(\d+))?\s*(?:years?|yrs?|jahre)",
        re.IGNORECASE,
    ),
    # "2 yrs", "4+ Jahre"
    re.compile(
        r"(\d+)\+?\s*(?:-\s*(\d+))?\s*(?:jahre|years?|yrs?)",
        re.IGNORECASE,
    ),
)


def classify(description: str | None, entry_keywords: Iterable[str] = ENTRY_LEVEL_KEYWORDS) -> str:
    """
    Infer the required experience from free text.

    Returns "N-M" or "N+" from the first matching pattern, "0-2" when only an
    entry-level keyword is present, otherwise "Not specified". Numeric
    evidence always wins over keywords.
    """
    if not description:
        return NOT_SPECIFIED

    for pattern in _PATTERNS:
        m = pattern.search(description)
        if m:
            low, high = m.group(1), m.group(2)
            return f"{low}-{high}" if high else f"{low}+"

    text = description.lower()
    if any(k in text for k in entry_keywords):
        return ENTRY_LEVEL_RANGE

    return NOT_SPECIFIED
