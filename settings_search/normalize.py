from __future__ import annotations

"""
Text coercion helpers shared by the scorer, the schema adapter and the
result mapping.

Matching only ever case-folds; no Unicode normalisation or tokenisation
happens here.
"""

import re
from typing import Optional

from . import config


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\s_\-.]+")


def pass_string(text: Optional[str]) -> str:
    """
    Lowercase ``text`` for matching; absent text becomes "".
    """
    if text is None:
        return ""
    return text.lower()


def clamp_text_length(text: str, max_chars: int = config.DEFAULT_MAX_QUERY_CHARS) -> str:
    """Hard cap on text length."""
    if len(text) > max_chars:
        return text[:max_chars]
    return text


def normalize_query(text: Optional[str], max_chars: int = config.DEFAULT_MAX_QUERY_CHARS) -> str:
    """
    Query as typed by the user -> text ready for ranking.

    Only the length is capped here; case-folding happens in the ranking engine
    so that direct callers of the engine get the same behaviour.
    """
    return clamp_text_length("" if text is None else str(text), max_chars)


def humanize_item_name(name: str) -> str:
    """
    Turn a setting key into a display title:
      'showInvisibles' -> 'Show Invisibles', 'tab_length' -> 'Tab Length'
    """
    if not name:
        return ""
    spaced = _CAMEL_BOUNDARY.sub(" ", name)
    words = [w for w in _SEPARATORS.split(spaced) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)
