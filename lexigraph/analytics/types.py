"""
Types for analytics dashboards.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd


@dataclass(frozen=True)
class Lesson:
    """A fixed block of consecutive words (inclusive index range)."""
    id: int
    title: str
    word_start: int
    word_end: int

    @property
    def size(self) -> int:
        return self.word_end - self.word_start + 1


@dataclass(frozen=True)
class DashboardData:
    """
    Precomputed mastery figures for the dashboard.
    """
    mastered: int
    total: int
    mastery_percentage: float
    current_lesson: int
    lesson_mastery: pd.DataFrame = field(repr=False)
    category_mastery: pd.Series = field(repr=False)
