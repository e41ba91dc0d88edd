from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RawRecord:
    """
    One listing as pulled out of a document snapshot (pre-classification).

    Only plain strings cross from the extractor into enrichment; location and
    url already carry their defaults. `description` feeds the classifier and
    never reaches a JobPosting.
    """

    title: str
    location: str
    url: str
    description: str | None
    extracted_at: str


@dataclass(frozen=True)
class JobPosting:
    """A single classified job posting, as written to the result file."""

    company: str
    title: str
    location: str
    url: str
    experience_years: str
    extracted_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "company": self.company,
            "title": self.title,
            "location": self.location,
            "url": self.url,
            "experienceYears": self.experience_years,
            "extractedAt": self.extracted_at,
        }


@dataclass(frozen=True)
class ScrapeResult:
    """
    Outcome of scraping one source.
    - success=True:  error is None, jobs may be empty (zero listings is valid)
    - success=False: jobs is empty, error carries the reason
    """

    success: bool
    company: str
    jobs: tuple[JobPosting, ...] = ()
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("successful ScrapeResult cannot carry an error")
        if not self.success and (self.jobs or not self.error):
            raise ValueError("failed ScrapeResult needs an error and no jobs")

    @classmethod
    def ok(cls, company: str, jobs: list[JobPosting] | tuple[JobPosting, ...]) -> ScrapeResult:
        return cls(success=True, company=company, jobs=tuple(jobs), error=None)

    @classmethod
    def failed(cls, company: str, error: str) -> ScrapeResult:
        return cls(success=False, company=company, jobs=(), error=error or "unknown error")


@dataclass(frozen=True)
class FilterStats:
    """Per-criterion counts over the original set, plus final totals."""

    total_original: int
    total_filtered: int
    removed: int
    by_location: int
    by_level: int
    by_experience: int

    def to_dict(self) -> dict[str, int]:
        return {
            "totalOriginal": self.total_original,
            "totalFiltered": self.total_filtered,
            "removed": self.removed,
            "byLocation": self.by_location,
            "byLevel": self.by_level,
            "byExperience": self.by_experience,
        }


@dataclass(frozen=True)
class RunReport:
    """
    Everything one pipeline run produced.
    - scraped: all postings from successful sources, in source order (pre-filter)
    - jobs:    final list (== scraped when filtering is disabled)
    - stats:   None when filtering is disabled
    """

    scraped_at: str
    results: tuple[ScrapeResult, ...]
    scraped: tuple[JobPosting, ...]
    jobs: tuple[JobPosting, ...]
    stats: FilterStats | None = None

    @property
    def errors(self) -> list[dict[str, str]]:
        return [{"company": r.company, "error": r.error or ""} for r in self.results if not r.success]
