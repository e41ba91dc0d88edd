# modules/career_scan/lib/filters.py
"""
Filter/dedup stage and its statistics.

A posting survives when all three predicates hold:
  - location:   location text mentions a gazetteer entry
  - seniority:  junior signal present and no senior keyword (senior vetoes)
  - experience: required minimum years within the ceiling

followed by URL dedup (first occurrence wins).

Unknown experience ("Not specified") is read leniently twice: it passes the
ceiling, and it counts as a junior signal unless
`FilterPolicy.unknown_experience_is_junior` is switched off.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from . import keywords
from .models import FilterStats, JobPosting

_FIRST_INT_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class FilterPolicy:
    location_keywords: tuple[str, ...] = keywords.LOCATION_KEYWORDS
    junior_keywords: tuple[str, ...] = keywords.JUNIOR_KEYWORDS
    senior_keywords: tuple[str, ...] = keywords.SENIOR_KEYWORDS
    max_experience_years: int = 3
    unknown_experience_is_junior: bool = True

    def with_max_experience(self, years: int) -> FilterPolicy:
        return replace(self, max_experience_years=years)


DEFAULT_POLICY = FilterPolicy()


def contains_any(text: str | None, words: Iterable[str]) -> bool:
    if not text:
        return False
    lower = text.lower()
    return any(w in lower for w in words)


# ---- predicates --------------------------------------------------------------


def is_target_location(job: JobPosting, policy: FilterPolicy = DEFAULT_POLICY) -> bool:
    return contains_any(job.location or "", policy.location_keywords)


def is_junior_position(job: JobPosting, policy: FilterPolicy = DEFAULT_POLICY) -> bool:
    # Title + location only; the description is gone by now.
    combined = f"{job.title or ''} {job.location or ''}"
    if contains_any(combined, policy.senior_keywords):
        return False

    experience = job.experience_years or ""
    low_experience = any(m in experience for m in keywords.LOW_EXPERIENCE_MARKERS)
    if policy.unknown_experience_is_junior and experience == keywords.NOT_SPECIFIED:
        low_experience = True

    return low_experience or contains_any(combined, policy.junior_keywords)


def is_suitable_experience(job: JobPosting, policy: FilterPolicy = DEFAULT_POLICY) -> bool:
    experience = job.experience_years or ""
    if experience == keywords.NOT_SPECIFIED:
        return True
    m = _FIRST_INT_RE.search(experience)
    if not m:
        return True
    return int(m.group(0)) <= policy.max_experience_years


# ---- stage -------------------------------------------------------------------


def filter_jobs(jobs: Sequence[JobPosting], policy: FilterPolicy = DEFAULT_POLICY) -> list[JobPosting]:
    """Apply all predicates, then drop later postings whose url was already kept."""
    kept = [
        j
        for j in jobs
        if is_target_location(j, policy) and is_junior_position(j, policy) and is_suitable_experience(j, policy)
    ]

    seen: set[str] = set()
    unique: list[JobPosting] = []
    for j in kept:
        if j.url in seen:
            continue
        seen.add(j.url)
        unique.append(j)
    return unique


def filter_stats(
    original: Sequence[JobPosting],
    filtered: Sequence[JobPosting],
    policy: FilterPolicy = DEFAULT_POLICY,
) -> FilterStats:
    """
    Count how many originals pass each predicate on its own, so an operator
    can see which criterion is doing most of the cutting.
    """
    return FilterStats(
        total_original=len(original),
        total_filtered=len(filtered),
        removed=len(original) - len(filtered),
        by_location=sum(1 for j in original if is_target_location(j, policy)),
        by_level=sum(1 for j in original if is_junior_position(j, policy)),
        by_experience=sum(1 for j in original if is_suitable_experience(j, policy)),
    )
