"""
Due-item queries over a collection of memory states.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from lexigraph.fsrs.constants import R_TARGET
from lexigraph.fsrs.memory_state import (
    MemoryState,
    is_due,
    next_review_at,
    retrievability,
)


@dataclass(frozen=True)
class DueItem:
    """One item that needs review, with its urgency."""
    item_id: str
    retrievability: float
    is_new: bool = False
    due_at: Optional[datetime] = None


def get_due_items(
    states: Mapping[str, MemoryState],
    now: datetime,
    r_target: float = R_TARGET
) -> list[DueItem]:
    """
    Get items with retrievability below threshold (due for review).

    Args:
        states: Memory state per item id
        now: Current time
        r_target: Retrievability threshold

    Returns:
        DueItems sorted most urgent first: lowest retrievability, then
        unreviewed items, ties broken by id
    """
    due_items = [
        DueItem(
            item_id=item_id,
            retrievability=retrievability(state, now),
            is_new=state.is_new,
            due_at=next_review_at(state, r_target),
        )
        for item_id, state in states.items()
        if is_due(state, now, r_target)
    ]

    due_items.sort(key=lambda d: (d.is_new, d.retrievability, d.item_id))
    return due_items
