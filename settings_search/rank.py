# settings_search/rank.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from loguru import logger

from . import config
from .config import BonusPolicy
from .lcs import get_score
from .normalize import pass_string
from .pipeline_types import Candidate, FieldScore, RankResult


# ---------------------------------------------------------------------------
# Per-candidate scoring
# ---------------------------------------------------------------------------

def score_fields(query: str, candidate: Candidate) -> Dict[str, FieldScore]:
    """
    Score the four searchable fields of ``candidate`` against ``query``.
    Both sides are case-folded; absent fields score as "".
    """
    q = pass_string(query)
    return {
        config.FIELD_TITLE: get_score(pass_string(candidate.title), q),
        config.FIELD_DESCRIPTION: get_score(pass_string(candidate.description), q),
        config.FIELD_GROUP_NAME: get_score(pass_string(candidate.group_name), q),
        config.FIELD_ITEM_NAME: get_score(pass_string(candidate.item_name), q),
    }


def compute_bonuses(
    field_scores: Dict[str, FieldScore],
    policy: BonusPolicy = config.DEFAULT_BONUS_POLICY,
) -> Dict[str, float]:
    """
    Bonus terms added on top of the raw field scores.

    Under the legacy policy the perfect description and perfect group-name
    bonuses are keyed on the title score; rankings produced by existing
    installations depend on it.
    """
    title = field_scores[config.FIELD_TITLE].score
    description = field_scores[config.FIELD_DESCRIPTION].score
    group_name = field_scores[config.FIELD_GROUP_NAME].score
    item_name = field_scores[config.FIELD_ITEM_NAME].score

    if BonusPolicy(policy) is BonusPolicy.PER_FIELD_KEYED:
        perfect_description_key = description
        perfect_group_name_key = group_name
    else:
        perfect_description_key = title
        perfect_group_name_key = title

    perfect = config.PERFECT_MATCH_BONUS
    return {
        "title": config.TITLE_BONUS if title > config.TITLE_BONUS_THRESHOLD else 0.0,
        "perfect_title": perfect if title == 1 else 0.0,
        "description": (
            config.DESCRIPTION_BONUS if description > config.DESCRIPTION_BONUS_THRESHOLD else 0.0
        ),
        "perfect_description": perfect if perfect_description_key == 1 else 0.0,
        "group_name": (
            config.GROUP_NAME_BONUS if group_name > config.GROUP_NAME_BONUS_THRESHOLD else 0.0
        ),
        "perfect_group_name": perfect if perfect_group_name_key == 1 else 0.0,
        "item_name": (
            config.ITEM_NAME_BONUS if item_name > config.ITEM_NAME_BONUS_THRESHOLD else 0.0
        ),
        "perfect_item_name": perfect if item_name == 1 else 0.0,
    }


def compute_total_score(field_scores: Dict[str, FieldScore], bonuses: Dict[str, float]) -> float:
    """Sum of the four field scores and every bonus term."""
    base = sum(field_scores[name].score for name in config.SCORED_FIELDS)
    return base + sum(bonuses.values())


def score_candidate(
    query: str,
    candidate: Candidate,
    policy: BonusPolicy = config.DEFAULT_BONUS_POLICY,
) -> RankResult:
    field_scores = score_fields(query, candidate)
    bonuses = compute_bonuses(field_scores, policy)
    return RankResult(
        candidate=candidate,
        field_scores=field_scores,
        total_score=compute_total_score(field_scores, bonuses),
        bonuses=bonuses,
    )


# ---------------------------------------------------------------------------
# Filtering and ordering
# ---------------------------------------------------------------------------

def filter_ranks(ranks: Sequence[RankResult], min_score: float) -> List[RankResult]:
    """Keep results scoring strictly above ``min_score``."""
    return [r for r in ranks if r.total_score > min_score]


def sort_ranks(ranks: Sequence[RankResult]) -> List[RankResult]:
    """
    Highest total score first. Equal scores keep their input order
    (enumeration index is the secondary key).
    """
    indexed = sorted(enumerate(ranks), key=lambda t: (-t[1].total_score, t[0]))
    return [r for _, r in indexed]


# ---------------------------------------------------------------------------
# Main entry
# ---------------------------------------------------------------------------

def rank_candidates(
    query: str,
    candidates: Sequence[Candidate],
    min_score: Optional[float],
    policy: BonusPolicy = config.DEFAULT_BONUS_POLICY,
) -> List[RankResult]:
    """
    Rank ``candidates`` against ``query``:
      1) score title / description / group name / item name via LCS
      2) combine into a total with weighted bonuses (see ``compute_bonuses``)
      3) drop totals <= min_score
      4) sort by total descending, ties in input order

    Every call is independent; nothing is cached between calls.
    """
    if min_score is None:
        raise ValueError("min_score is required; pass the host's configured threshold")
    min_score = float(min_score)

    ranks = [score_candidate(query, c, policy) for c in candidates]
    kept = sort_ranks(filter_ranks(ranks, min_score))

    logger.debug(
        "Ranked {} candidates for query {!r}: {} above min_score={} (policy={})",
        len(ranks),
        query,
        len(kept),
        min_score,
        BonusPolicy(policy).value,
    )
    return kept
