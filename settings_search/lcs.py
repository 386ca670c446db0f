from __future__ import annotations

"""
Longest Common Subsequence similarity.

``get_score(reference, query)`` returns how much of ``reference`` is covered by
a common subsequence with ``query``, normalised by the reference length, plus
one concrete LCS string that callers can use for highlighting.
"""

from typing import Optional

import numpy as np

from .pipeline_types import FieldScore


def lcs_matrix(reference: str, query: str) -> np.ndarray:
    """
    Classical O(n*m) LCS table.

    ``matrix[i, j]`` is the LCS length of ``reference[:i]`` and ``query[:j]``;
    shape is ``(len(reference) + 1, len(query) + 1)``.
    """
    height = len(reference) + 1
    width = len(query) + 1
    matrix = np.zeros((height, width), dtype=np.int32)

    # Rows are filled as plain lists; per-element numpy indexing is slow.
    prev = [0] * width
    for row in range(1, height):
        ref_char = reference[row - 1]
        curr = [0] * width
        for col in range(1, width):
            if ref_char == query[col - 1]:
                curr[col] = prev[col - 1] + 1
            else:
                curr[col] = max(curr[col - 1], prev[col])
        matrix[row] = curr
        prev = curr

    return matrix


def lcs_traceback(matrix: np.ndarray, reference: str, query: str) -> str:
    """
    Rebuild one LCS string from a table produced by :func:`lcs_matrix`.

    Walks back from the bottom-right corner. When the boundary characters
    differ we step towards the larger neighbour; on equal neighbours the
    query index is reduced first.
    """
    row = len(reference)
    col = len(query)
    if row == 0 or col == 0:
        return ""

    chars = []
    while row > 0 and col > 0:
        if reference[row - 1] == query[col - 1]:
            chars.append(reference[row - 1])
            row -= 1
            col -= 1
        elif matrix[row - 1, col] > matrix[row, col - 1]:
            row -= 1
        else:
            col -= 1

    chars.reverse()
    return "".join(chars)


def get_score(reference: Optional[str], query: Optional[str]) -> FieldScore:
    """
    Similarity of ``query`` against ``reference`` in [0, 1].

    Both strings are compared as given; case-fold them beforehand. ``None`` is
    treated as "". An empty reference scores 0.
    """
    reference = reference or ""
    query = query or ""

    if not reference or not query:
        return FieldScore(score=0.0, sequence="")

    matrix = lcs_matrix(reference, query)
    longest = lcs_traceback(matrix, reference, query)

    return FieldScore(score=len(longest) / len(reference), sequence=longest)


def lcs_length(a: str, b: str) -> int:
    """Length of the longest common subsequence of ``a`` and ``b``."""
    if not a or not b:
        return 0
    return int(lcs_matrix(a, b)[len(a), len(b)])
