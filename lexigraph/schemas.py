"""
Pydantic models for vocabulary content and quests.

The scheduler never reads these; they describe what the graph front end
displays and how analytics group items.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Semantic category used to cluster words in the graph."""
    VERB = "verb"
    EMOTION = "emotion"
    FOOD = "food"
    THEME = "theme"


class VocabularyItem(BaseModel):
    """
    A single word of the course.

    Static content: identified by `id`, which is also the key of its
    memory state.
    """
    id: str = Field(..., description="Stable item identifier")
    text: str = Field(..., description="Word in the source language")
    translation: str = Field(default="", description="Word in the target language")
    category: Category = Field(default=Category.THEME, description="Graph cluster")
    relations: list[str] = Field(default_factory=list, description="Ids of related words")
    lesson: Optional[int] = Field(default=None, ge=1, description="Lesson number, if assigned")

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # Front-end word ids are numeric
        return str(value) if isinstance(value, int) else value

    @field_validator("relations", mode="before")
    @classmethod
    def _coerce_relations(cls, value):
        if value is None:
            return []
        return [str(v) if isinstance(v, int) else v for v in value]


class Quest(BaseModel):
    """Goal of mastering `target` words of one category."""
    id: int
    title: str
    category: Category
    target: int = Field(..., ge=1)
    progress: int = Field(default=0, ge=0)
    unlocked: bool = False

    model_config = ConfigDict(use_enum_values=True)
