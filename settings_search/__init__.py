"""Fuzzy LCS search and ranking over application settings."""

from .lcs import get_score
from .rank import rank_candidates

__all__ = ["get_score", "rank_candidates"]
