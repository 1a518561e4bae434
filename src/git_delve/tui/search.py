"""Literal substring search over the displayed blame rows, vim-style / n N.

Scans never wrap: reaching either end of the list without a match is a
silent no-op for the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class SearchDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


def search(
    texts: Sequence[str],
    query: str,
    from_index: int | None,
    direction: SearchDirection = SearchDirection.FORWARD,
) -> int | None:
    """Return the index of the next row containing `query`, or None.

    Forward scans start at from_index + 1 (index 0 when unset); backward
    scans start at from_index - 1 (the last row when unset).
    """
    if not query or not texts:
        return None
    if direction is SearchDirection.FORWARD:
        start = 0 if from_index is None else from_index + 1
        indices = range(max(start, 0), len(texts))
    else:
        start = len(texts) - 1 if from_index is None else from_index - 1
        indices = range(min(start, len(texts) - 1), -1, -1)
    for idx in indices:
        if query in texts[idx]:
            return idx
    return None
