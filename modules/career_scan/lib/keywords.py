# modules/career_scan/lib/keywords.py
"""
Keyword tables used by the classifier and the filter stage.

These are policy data: FilterPolicy carries copies of them, and a companies
file may replace any of them without touching the matching code. All entries
are lowercase; matching is case-insensitive substring search.
"""

from __future__ import annotations

NOT_SPECIFIED = "Not specified"

# Returned by the classifier when only an entry-level keyword was found.
ENTRY_LEVEL_RANGE = "0-2"

# Germany: country names, major cities (with umlaut/transliterated variants),
# regions, plus explicit remote tokens.
LOCATION_KEYWORDS: tuple[str, ...] = (
    # Country names
    "germany",
    "deutschland",
    "german",
    # Major cities
    "berlin",
    "munich",
    "münchen",
    "hamburg",
    "cologne",
    "köln",
    "frankfurt",
    "stuttgart",
    "düsseldorf",
    "dusseldorf",
    "dortmund",
    "essen",
    "leipzig",
    "bremen",
    "dresden",
    "hanover",
    "hannover",
    "nuremberg",
    "nürnberg",
    "duisburg",
    "bochum",
    "wuppertal",
    "bielefeld",
    "bonn",
    "münster",
    "mannheim",
    "augsburg",
    "karlsruhe",
    "wiesbaden",
    "heidelberg",
    "freiburg",
    "potsdam",
    # Regions
    "bavaria",
    "bayern",
    "nordrhein",
    "westfalen",
    "baden-württemberg",
    "sachsen",
    "hessen",
    "remote germany",
    "remote de",
)

JUNIOR_KEYWORDS: tuple[str, ...] = (
    "junior",
    "entry-level",
    "entry level",
    "graduate",
    "berufseinsteiger",
    "trainee",
    "associate",
    "nachwuchs",
)

# Any hit vetoes a posting, whatever the junior signals say.
SENIOR_KEYWORDS: tuple[str, ...] = (
    "senior",
    "lead",
    "principal",
    "staff",
    "architect",
    "manager",
    "director",
    "head of",
    "chief",
    "vp",
    "vice president",
)

# Free-text hints in a description that imply an entry-level range.
ENTRY_LEVEL_KEYWORDS: tuple[str, ...] = (
    "entry level",
    "entry-level",
    "berufseinsteiger",
    "no experience",
    "graduate",
    "junior",
)

# experience_years substrings read as a junior signal.
LOW_EXPERIENCE_MARKERS: tuple[str, ...] = ("0-", "1-", "2-")
