"""
Analytics package exports.
"""

from lexigraph.analytics.lessons import build_lessons, lesson_for_index
from lexigraph.analytics.quests import DEFAULT_QUESTS, update_quest_progress
from lexigraph.analytics.service import build_dashboard
from lexigraph.analytics.types import DashboardData, Lesson

__all__ = [
    "build_lessons",
    "lesson_for_index",
    "DEFAULT_QUESTS",
    "update_quest_progress",
    "build_dashboard",
    "DashboardData",
    "Lesson",
]
