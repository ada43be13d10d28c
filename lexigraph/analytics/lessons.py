"""
Lesson partitioning of the word list.
"""

from __future__ import annotations

import math

from lexigraph.analytics.types import Lesson
from lexigraph.fsrs.constants import LESSON_SIZE, MAX_WORD_INDEX


def build_lessons(total_items: int = MAX_WORD_INDEX + 1, size: int = LESSON_SIZE) -> list[Lesson]:
    """
    Split `total_items` words into lessons of `size` consecutive words.

    The last lesson holds the remainder. With the defaults this yields the
    112 lessons of the Oxford 3000 course (indices 0-2997).
    """
    if size < 1:
        raise ValueError(f"Lesson size must be >= 1, got {size}")
    if total_items <= 0:
        return []

    count = math.ceil(total_items / size)
    return [
        Lesson(
            id=i + 1,
            title=f"Lesson {i + 1}",
            word_start=i * size,
            word_end=min((i + 1) * size - 1, total_items - 1),
        )
        for i in range(count)
    ]


def lesson_for_index(index: int, size: int = LESSON_SIZE) -> int:
    """1-based lesson number of a word index."""
    if index < 0:
        raise ValueError(f"Word index must be >= 0, got {index}")
    return index // size + 1
