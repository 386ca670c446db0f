"""Typed containers shared across scoring and ranking modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Candidate:
    """One searchable setting, flattened out of the host schema."""

    group_name: str
    item_name: str
    title: Optional[str]
    description: Optional[str]
    path: str


@dataclass(frozen=True)
class FieldScore:
    """Normalised LCS similarity of one field plus the matched subsequence."""

    score: float
    sequence: str


@dataclass
class RankResult:
    """A candidate with its per-field scores and combined ranking score."""

    candidate: Candidate
    field_scores: Dict[str, FieldScore]
    total_score: float
    bonuses: Dict[str, float] = field(default_factory=dict)
