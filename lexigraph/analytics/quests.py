"""
Quest progress derived from category mastery.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from lexigraph.schemas import Category, Quest

DEFAULT_QUESTS = [
    Quest(id=1, title="Weave 5 Verbs", category=Category.VERB, target=5),
    Quest(id=2, title="Master 3 Emotions", category=Category.EMOTION, target=3),
    Quest(id=3, title="Connect 4 Food Words", category=Category.FOOD, target=4),
]


def update_quest_progress(quests: Iterable[Quest], category_mastery: pd.Series) -> list[Quest]:
    """
    Set each quest's progress to the mastered count in its category.

    Progress is capped at the target; a quest unlocks once it reaches the
    target and stays unlocked. Returns new Quest objects.
    """
    updated = []
    for quest in quests:
        mastered = int(category_mastery.get(quest.category, 0))
        progress = min(mastered, quest.target)
        updated.append(quest.model_copy(update={
            "progress": progress,
            "unlocked": quest.unlocked or progress >= quest.target,
        }))
    return updated
