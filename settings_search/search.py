from __future__ import annotations

"""
Search session for a settings panel.

The host calls :meth:`SettingsSearch.search` every time the user stops
typing. Each call gets a new generation number; results whose generation is
no longer current were superseded by a newer query and should be discarded
instead of rendered.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from .config import SearchSettings
from .normalize import normalize_query
from .pipeline_types import Candidate, RankResult
from .rank import rank_candidates


@dataclass(frozen=True)
class SearchOutcome:
    generation: int
    query: str
    results: List[RankResult]


class SettingsSearch:
    def __init__(
        self,
        candidates: Sequence[Candidate],
        settings: Optional[SearchSettings] = None,
    ):
        self.candidates: List[Candidate] = list(candidates)
        self.settings = settings if settings is not None else SearchSettings.from_env()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def search(self, text: Optional[str]) -> SearchOutcome:
        query = normalize_query(text, self.settings.max_query_chars)
        self._generation += 1
        generation = self._generation

        results = rank_candidates(
            query,
            self.candidates,
            min_score=self.settings.min_score,
            policy=self.settings.bonus_policy,
        )
        logger.info(
            "Search #{} for {!r}: {} of {} settings matched",
            generation,
            query,
            len(results),
            len(self.candidates),
        )
        return SearchOutcome(generation=generation, query=query, results=results)

    def is_current(self, outcome: SearchOutcome) -> bool:
        """True if no newer search (or clear) happened since ``outcome``."""
        return outcome.generation == self._generation

    def clear(self) -> None:
        """Invalidate every outstanding outcome."""
        self._generation += 1
