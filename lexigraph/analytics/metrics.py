"""
Metric computations for the mastery dashboard.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

from lexigraph.analytics.types import Lesson
from lexigraph.fsrs.constants import MASTERY_STABILITY
from lexigraph.fsrs.memory_state import MemoryState, retrievability
from lexigraph.schemas import Category, VocabularyItem

STATE_COLUMNS = [
    "item_id",
    "stability",
    "difficulty",
    "review_count",
    "retrievability",
    "mastered",
]


def states_to_frame(
    states: Mapping[str, MemoryState],
    now: datetime,
    mastery_threshold: float = MASTERY_STABILITY
) -> pd.DataFrame:
    """
    One row per item with its current retrievability and mastered flag.
    """
    if not states:
        return pd.DataFrame(columns=STATE_COLUMNS)

    rows = [
        {
            "item_id": item_id,
            "stability": state.stability,
            "difficulty": state.difficulty,
            "review_count": state.review_count,
            "retrievability": retrievability(state, now),
            "mastered": state.stability > mastery_threshold,
        }
        for item_id, state in states.items()
    ]
    return pd.DataFrame(rows, columns=STATE_COLUMNS)


def compute_mastered_count(states_df: pd.DataFrame) -> int:
    if states_df.empty:
        return 0
    return int(states_df["mastered"].sum())


def compute_mastery_percentage(states_df: pd.DataFrame, total: Optional[int] = None) -> float:
    """
    Mastered items as a percentage of `total` (defaults to rows in the frame).
    """
    denominator = len(states_df) if total is None else total
    if denominator <= 0:
        return 0.0
    return 100.0 * compute_mastered_count(states_df) / denominator


def compute_lesson_mastery(
    states_df: pd.DataFrame,
    item_order: Sequence[str],
    lessons: Iterable[Lesson]
) -> pd.DataFrame:
    """
    Mastered/total per lesson.

    `item_order` is the course word list; lesson ranges index into it.
    Words without a memory state count as not mastered.
    """
    mastered_ids = (
        set(states_df.loc[states_df["mastered"].astype(bool), "item_id"])
        if not states_df.empty
        else set()
    )

    rows = []
    for lesson in lessons:
        lesson_items = item_order[lesson.word_start:lesson.word_end + 1]
        total = len(lesson_items)
        mastered = sum(1 for item_id in lesson_items if item_id in mastered_ids)
        rows.append({
            "lesson_id": lesson.id,
            "title": lesson.title,
            "mastered": mastered,
            "total": total,
            "complete": total > 0 and mastered == total,
        })

    return pd.DataFrame(rows, columns=["lesson_id", "title", "mastered", "total", "complete"])


def compute_category_mastery(
    states_df: pd.DataFrame,
    items: Iterable[VocabularyItem]
) -> pd.Series:
    """
    Mastered word count per category, with every category present.
    """
    categories = [c.value for c in Category]
    items_df = pd.DataFrame(
        [{"item_id": item.id, "category": item.category} for item in items],
        columns=["item_id", "category"],
    )
    if items_df.empty or states_df.empty:
        return pd.Series(0, index=categories, dtype="int64")

    merged = items_df.merge(states_df[["item_id", "mastered"]], on="item_id", how="left")
    merged["mastered"] = merged["mastered"].eq(True)
    counts = merged[merged["mastered"]].groupby("category").size()
    return counts.reindex(categories, fill_value=0).astype("int64")


def compute_current_lesson(states_df: pd.DataFrame, items: Iterable[VocabularyItem]) -> int:
    """
    Highest lesson containing a reviewed word (1 before any review).
    """
    lessons = {item.id: item.lesson for item in items if item.lesson is not None}
    if states_df.empty or not lessons:
        return 1
    reviewed = states_df.loc[states_df["review_count"] > 0, "item_id"]
    reached = [lessons[item_id] for item_id in reviewed if item_id in lessons]
    return max(reached, default=1)
