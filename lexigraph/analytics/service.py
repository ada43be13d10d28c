"""
Service layer to assemble the mastery dashboard.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Sequence

from lexigraph.analytics.lessons import build_lessons
from lexigraph.analytics.metrics import (
    compute_category_mastery,
    compute_current_lesson,
    compute_lesson_mastery,
    compute_mastered_count,
    compute_mastery_percentage,
    states_to_frame,
)
from lexigraph.analytics.types import DashboardData
from lexigraph.fsrs.constants import LESSON_SIZE, MAX_WORD_INDEX
from lexigraph.fsrs.memory_state import MemoryState
from lexigraph.schemas import VocabularyItem


def build_dashboard(
    states: Mapping[str, MemoryState],
    items: Sequence[VocabularyItem],
    now: datetime,
    lesson_size: Optional[int] = None
) -> DashboardData:
    """
    Build every figure the dashboard shows.

    `items` is the course word list in lesson order; `states` holds a memory
    state for each reviewed item. Percentages are over the whole course.
    """
    states_df = states_to_frame(states, now)
    # Lessons stop at the Oxford 3000 cap; later words belong to none
    lessons = build_lessons(min(len(items), MAX_WORD_INDEX + 1), lesson_size or LESSON_SIZE)
    item_order = [item.id for item in items]

    return DashboardData(
        mastered=compute_mastered_count(states_df),
        total=len(items),
        mastery_percentage=compute_mastery_percentage(states_df, total=len(items)),
        current_lesson=compute_current_lesson(states_df, items),
        lesson_mastery=compute_lesson_mastery(states_df, item_order, lessons),
        category_mastery=compute_category_mastery(states_df, items),
    )
