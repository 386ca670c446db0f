# settings_search/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from . import config
from .catalog_build import build_candidates, load_schema
from .config import BonusPolicy, SearchResponse, SearchSettings
from .mapping import map_results_to_response
from .search import SettingsSearch


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _response_table(response: SearchResponse) -> pd.DataFrame:
    rows = [
        {"path": item.path, "title": item.title, "score": item.total_score}
        for item in response.results
    ]
    return pd.DataFrame(rows, columns=["path", "title", "score"])


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="settings-search",
        description="Rank settings from a schema file against a search query.",
    )
    ap.add_argument("--schema", type=Path, default=config.DEFAULT_SCHEMA_PATH,
                    help="Path to the settings schema JSON")
    ap.add_argument("--query", required=True, help="Search text as typed by the user")
    ap.add_argument("--min-score", type=float, default=None,
                    help=f"Minimum total score (default: ${config.MIN_SCORE_ENV} or {config.DEFAULT_MIN_SCORE})")
    ap.add_argument("--policy", choices=[p.value for p in BonusPolicy], default=None,
                    help="Which field the perfect-match bonuses are keyed on")
    ap.add_argument("--limit", type=_non_negative_int, default=None, help="Show at most N results")
    ap.add_argument("--json", action="store_true", help="Print the full JSON response")
    ap.add_argument("--log-level", default=config.LOG_LEVEL)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        settings = SearchSettings.from_env()
    except ValidationError as e:
        logger.error("Invalid search settings in environment: {}", e)
        return 1

    overrides = {}
    if args.min_score is not None:
        overrides["min_score"] = args.min_score
    if args.policy is not None:
        overrides["bonus_policy"] = BonusPolicy(args.policy)
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        schema = load_schema(args.schema)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load settings schema: {}", e)
        return 1

    session = SettingsSearch(build_candidates(schema), settings)
    response = map_results_to_response(session.search(args.query), limit=args.limit)

    if args.json:
        print(response.model_dump_json(indent=2))
        return 0

    if not response.results:
        print(f"No settings matched {response.query!r} (min score {settings.min_score}).")
        return 0

    print(_response_table(response).to_string(index=False))
    print(f"\n{len(response.results)} of {response.total_matches} matches shown")
    return 0


if __name__ == "__main__":
    sys.exit(main())
