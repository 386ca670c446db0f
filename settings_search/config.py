from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PACKAGE_DIR = Path(__file__).resolve().parent

# Sample schema shipped as package data
DATA_DIR = PACKAGE_DIR / "data"
DEFAULT_SCHEMA_PATH = DATA_DIR / "config_schema.json"


# ---------------------------
# Field names (order matters for display and breakdowns)
# ---------------------------

FIELD_TITLE = "title"
FIELD_DESCRIPTION = "description"
FIELD_GROUP_NAME = "group_name"
FIELD_ITEM_NAME = "item_name"

SCORED_FIELDS: List[str] = [
    FIELD_TITLE,
    FIELD_DESCRIPTION,
    FIELD_GROUP_NAME,
    FIELD_ITEM_NAME,
]


# ---------------------------
# Bonus weights & thresholds
# ---------------------------

# A field scoring strictly above its threshold earns the matching bonus.
TITLE_BONUS_THRESHOLD = 0.8
TITLE_BONUS = 0.2

DESCRIPTION_BONUS_THRESHOLD = 0.5
DESCRIPTION_BONUS = 0.1

GROUP_NAME_BONUS_THRESHOLD = 0.8
GROUP_NAME_BONUS = 0.2

ITEM_NAME_BONUS_THRESHOLD = 0.8
ITEM_NAME_BONUS = 0.2

# Awarded on a perfect (== 1.0) match; which field is checked depends on the policy.
PERFECT_MATCH_BONUS = 0.1


class BonusPolicy(str, Enum):
    """
    Which field score the "perfect match" bonuses are keyed on.

    LEGACY_TITLE_KEYED reproduces the shipped ranking: the perfect description
    and perfect group-name bonuses fire on a perfect *title* match.
    PER_FIELD_KEYED keys every perfect bonus on its own field.
    """

    LEGACY_TITLE_KEYED = "legacy-title-keyed-bonus"
    PER_FIELD_KEYED = "per-field-keyed-bonus"


# ---------------------------
# Search settings & env toggles
# ---------------------------

MIN_SCORE_ENV = "SETTINGS_SEARCH_MIN_SCORE"
BONUS_POLICY_ENV = "SETTINGS_SEARCH_BONUS_POLICY"
MAX_QUERY_CHARS_ENV = "SETTINGS_SEARCH_MAX_QUERY_CHARS"

# Host default for the minimum total score a result needs to be listed.
DEFAULT_MIN_SCORE = 2.0
DEFAULT_BONUS_POLICY = BonusPolicy.LEGACY_TITLE_KEYED

# The DP matrix is len(field) x len(query); keep the query side bounded.
DEFAULT_MAX_QUERY_CHARS = 200

# Decimal places used when presenting scores
SCORE_DISPLAY_DIGITS = 4


# ---------------------------
# Logging
# ---------------------------

LOG_LEVEL = os.getenv("SETTINGS_SEARCH_LOG_LEVEL", "WARNING")


class SearchSettings(BaseModel):
    """
    Host-side knobs for a search session.

    The ranking engine itself never reads these; callers pass ``min_score``
    and ``bonus_policy`` explicitly.
    """

    min_score: float = DEFAULT_MIN_SCORE
    bonus_policy: BonusPolicy = DEFAULT_BONUS_POLICY
    max_query_chars: int = Field(default=DEFAULT_MAX_QUERY_CHARS, gt=0)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "SearchSettings":
        """
        Build settings from environment variables, falling back to defaults.
        Invalid values raise pydantic's ValidationError.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, str] = {}
        if env.get(MIN_SCORE_ENV):
            values["min_score"] = env[MIN_SCORE_ENV]
        if env.get(BONUS_POLICY_ENV):
            values["bonus_policy"] = env[BONUS_POLICY_ENV]
        if env.get(MAX_QUERY_CHARS_ENV):
            values["max_query_chars"] = env[MAX_QUERY_CHARS_ENV]
        return cls(**values)


# ---------------------------
# Pydantic models for presenting results
# ---------------------------

class FieldScoreItem(BaseModel):
    """Score of one field against the query, with the matched subsequence."""

    score: float = Field(ge=0.0, le=1.0)
    sequence: str


class SearchResultItem(BaseModel):
    """
    One ranked setting as handed to the rendering layer.
    """

    path: str
    title: str
    description: str
    group_name: str
    item_name: str
    total_score: float
    field_scores: Dict[str, FieldScoreItem]


class SearchResponse(BaseModel):
    """
    Ranked results for a single query.
    """

    query: str
    generation: int = Field(ge=0)
    total_matches: int = Field(ge=0)
    results: List[SearchResultItem]
