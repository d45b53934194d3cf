"""Relevance ranking for timeline search results.

Scoring is presence-based: each field contributes its weight once when it
contains the search term (case-insensitive), however often the term occurs.
"""

from __future__ import annotations

from collections.abc import Iterable

from snl_timeline.config.defaults import (
    WEIGHT_ACTION,
    WEIGHT_CATEGORY,
    WEIGHT_ERROR_MESSAGE,
    WEIGHT_INPUT_SUMMARY,
    WEIGHT_OUTPUT_SUMMARY,
    WEIGHT_TAG,
)
from snl_timeline.models.timeline_entry import TimelineEntry

__all__ = ["rank_by_relevance", "relevance_score"]


def relevance_score(entry: TimelineEntry, term: str) -> int:
    """Score how well an entry matches a search term.

    Weights: action 3, input summary 2, output summary 2, any tag 2,
    category 1, error message 1.

    Args:
        entry: Entry to score.
        term: Search term.

    Returns:
        The summed weights of the matching fields; 0 when nothing matches.

    """
    needle = term.strip().lower()
    if not needle:
        return 0

    score = 0
    if needle in entry.action.lower():
        score += WEIGHT_ACTION
    if needle in entry.input_summary.lower():
        score += WEIGHT_INPUT_SUMMARY
    if needle in entry.output_summary.lower():
        score += WEIGHT_OUTPUT_SUMMARY
    if any(needle in tag.lower() for tag in entry.tags):
        score += WEIGHT_TAG
    if needle in entry.category.value:
        score += WEIGHT_CATEGORY
    if entry.error_message and needle in entry.error_message.lower():
        score += WEIGHT_ERROR_MESSAGE
    return score


def rank_by_relevance(entries: Iterable[TimelineEntry], term: str) -> list[TimelineEntry]:
    """Order entries by relevance, newest first among equal scores.

    Entries scoring 0 are kept at the end rather than filtered out.
    """
    scored = [(relevance_score(entry, term), entry) for entry in entries]
    scored.sort(key=lambda pair: (pair[0], pair[1].created_at), reverse=True)
    return [entry for _, entry in scored]
