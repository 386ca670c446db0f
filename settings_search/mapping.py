from __future__ import annotations
"""
Mapping utilities to convert ranking results into presentable responses.

Centralises the conversion from RankResult dataclasses into the Pydantic
schemas (SearchResultItem / SearchResponse) so the CLI and any other
rendering layer show the same thing.
"""

from typing import Dict, List, Optional

from loguru import logger

from .config import (
    SCORE_DISPLAY_DIGITS,
    FieldScoreItem,
    SearchResponse,
    SearchResultItem,
)
from .normalize import humanize_item_name
from .pipeline_types import FieldScore, RankResult
from .search import SearchOutcome


def display_title(title: Optional[str], item_name: str) -> str:
    """Schema title if present, otherwise a humanised setting key."""
    if title and title.strip():
        return title.strip()
    return humanize_item_name(item_name)


def _field_scores_to_items(field_scores: Dict[str, FieldScore]) -> Dict[str, FieldScoreItem]:
    return {
        name: FieldScoreItem(
            score=round(fs.score, SCORE_DISPLAY_DIGITS),
            sequence=fs.sequence,
        )
        for name, fs in field_scores.items()
    }


def to_result_item(result: RankResult) -> SearchResultItem:
    c = result.candidate
    return SearchResultItem(
        path=c.path,
        title=display_title(c.title, c.item_name),
        description=(c.description or "").strip(),
        group_name=c.group_name,
        item_name=c.item_name,
        total_score=round(result.total_score, SCORE_DISPLAY_DIGITS),
        field_scores=_field_scores_to_items(result.field_scores),
    )


def map_results_to_response(outcome: SearchOutcome, limit: Optional[int] = None) -> SearchResponse:
    """
    Build the response for one search outcome, optionally keeping only the
    first ``limit`` results. Order is preserved.
    """
    results = outcome.results
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        results = results[:limit]

    items: List[SearchResultItem] = [to_result_item(r) for r in results]
    logger.debug(
        "Mapped {} of {} results for generation {}",
        len(items),
        len(outcome.results),
        outcome.generation,
    )
    return SearchResponse(
        query=outcome.query,
        generation=outcome.generation,
        total_matches=len(outcome.results),
        results=items,
    )
