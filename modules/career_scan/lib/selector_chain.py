from __future__ import annotations

import logging

from bs4 import Tag
from soupsieve import SelectorSyntaxError

log = logging.getLogger(__name__)


def split_candidates(selector_list: str | None) -> list[str]:
    """'a.title, h3 , .name' -> ['a.title', 'h3', '.name'] (declaration order kept)."""
    if not selector_list:
        return []
    return [s.strip() for s in selector_list.split(",") if s.strip()]


def resolve_one(scope: Tag, selector_list: str | None) -> Tag | None:
    """
    First element matched by the first candidate that matches anything.
    Invalid or unsupported candidates are skipped; None means the field is absent.
    """
    for candidate in split_candidates(selector_list):
        try:
            found = scope.select_one(candidate)
        except (SelectorSyntaxError, NotImplementedError):
            log.debug("skipping invalid selector %r", candidate)
            continue
        if found is not None:
            return found
    return None


def resolve_all(scope: Tag, selector_list: str | None) -> list[Tag]:
    """
    All elements matched by the first candidate that matches anything.
    Later candidates are never consulted once one yields results.
    """
    for candidate in split_candidates(selector_list):
        try:
            found = scope.select(candidate)
        except (SelectorSyntaxError, NotImplementedError):
            log.debug("skipping invalid selector %r", candidate)
            continue
        if found:
            return list(found)
    return []
