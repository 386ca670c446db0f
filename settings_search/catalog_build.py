from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import pandas as pd
from loguru import logger

from .config import DEFAULT_SCHEMA_PATH
from .pipeline_types import Candidate


CATALOG_COLUMNS: List[str] = [
    "group_name",
    "item_name",
    "title",
    "description",
    "path",
]

SchemaEntry = Tuple[str, str, Optional[str], Optional[str], str]


# ---------------------------
# Schema walking
# ---------------------------

def _text_or_none(value: Any, path: str, field: str) -> Optional[str]:
    """
    Keep string values; anything else is treated as absent.
    """
    if value is None or isinstance(value, str):
        return value
    logger.warning("Ignoring non-text {} for setting {}: {!r}", field, path, value)
    return None


def iter_schema_entries(schema: Mapping[str, Any]) -> Iterator[SchemaEntry]:
    """
    Walk a two-level settings schema and yield
    ``(group_name, item_name, title, description, path)`` tuples.

    Only groups declared as ``"type": "object"`` are listed; every entry in
    their ``properties`` becomes one setting with path ``group.item``.
    """
    for group_name, group_schema in schema.items():
        if not isinstance(group_schema, Mapping) or group_schema.get("type") != "object":
            logger.debug("Skipping non-object settings group {}", group_name)
            continue

        properties = group_schema.get("properties") or {}
        if not isinstance(properties, Mapping):
            logger.warning("Skipping settings group {}: properties is not an object", group_name)
            continue

        for item_name, item_schema in properties.items():
            path = f"{group_name}.{item_name}"
            if not isinstance(item_schema, Mapping):
                item_schema = {}
            yield (
                str(group_name),
                str(item_name),
                _text_or_none(item_schema.get("title"), path, "title"),
                _text_or_none(item_schema.get("description"), path, "description"),
                path,
            )


# ---------------------------
# Catalog frame
# ---------------------------

def schema_to_frame(schema: Mapping[str, Any]) -> pd.DataFrame:
    """
    Flatten a settings schema into the canonical catalog frame:

    - group_name (str)
    - item_name (str)
    - title (str or None)
    - description (str or None)
    - path (str; ``group_name.item_name``)
    """
    rows = list(iter_schema_entries(schema))
    df = pd.DataFrame(rows, columns=CATALOG_COLUMNS)
    logger.info("Flattened settings schema: {} groups -> {} settings", len(schema), len(df))
    return df


def _cell_text(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    return str(value)


def candidates_from_frame(df: pd.DataFrame) -> List[Candidate]:
    """
    Convert catalog rows to candidates in row order. Rows without a path
    cannot be addressed by the host and are dropped.
    """
    missing = [c for c in CATALOG_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Catalog frame is missing columns: {missing}")

    candidates: List[Candidate] = []
    dropped = 0
    for row in df[CATALOG_COLUMNS].itertuples(index=False, name=None):
        group_name, item_name, title, description, path = (_cell_text(v) for v in row)
        if not path:
            dropped += 1
            continue
        candidates.append(
            Candidate(
                group_name=group_name or "",
                item_name=item_name or "",
                title=title,
                description=description,
                path=path,
            )
        )

    if dropped:
        logger.warning("Dropped {} catalog rows without a setting path", dropped)
    return candidates


def build_candidates(schema: Mapping[str, Any]) -> List[Candidate]:
    """End-to-end: schema -> catalog frame -> candidates."""
    return candidates_from_frame(schema_to_frame(schema))


# ---------------------------
# IO helpers
# ---------------------------

def load_schema(path: Path = DEFAULT_SCHEMA_PATH) -> Dict[str, Any]:
    """
    Load a settings schema from JSON.

    Accepts either the group mapping itself or a full schema document whose
    groups live under a top-level ``properties`` key.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings schema not found: {path}")

    logger.info("Loading settings schema from {}", path)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Settings schema must be a JSON object, got {type(raw).__name__}")

    if raw.get("type") == "object" and isinstance(raw.get("properties"), dict):
        raw = raw["properties"]

    logger.info("Loaded settings schema with {} groups", len(raw))
    return raw
