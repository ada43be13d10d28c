from datetime import timedelta

import pandas as pd
import pytest

from lexigraph import fsrs
from lexigraph.analytics import (
    DEFAULT_QUESTS,
    build_dashboard,
    build_lessons,
    lesson_for_index,
    update_quest_progress,
)
from lexigraph.analytics.metrics import (
    compute_category_mastery,
    compute_lesson_mastery,
    compute_mastered_count,
    compute_mastery_percentage,
    states_to_frame,
)
from lexigraph.schemas import VocabularyItem


@pytest.fixture
def items():
    return [
        VocabularyItem(id=1, text="run", translation="correr", category="verb", lesson=1),
        VocabularyItem(id=2, text="eat", translation="comer", category="verb", lesson=1),
        VocabularyItem(id=3, text="joy", translation="alegria", category="emotion", lesson=2),
        VocabularyItem(id=4, text="bread", translation="pão", category="food", lesson=2),
        VocabularyItem(id=5, text="home", translation="casa", category="theme", lesson=3),
    ]


@pytest.fixture
def states(t0):
    reviewed = dict(last_review_timestamp=t0, review_count=1)
    return {
        "1": fsrs.MemoryState(stability=4.0, **reviewed),
        "2": fsrs.MemoryState(stability=6.9, **reviewed),
        "3": fsrs.MemoryState(stability=0.7, **reviewed),
        "4": fsrs.MemoryState(stability=4.0, **reviewed),
    }


# ---- Lessons ----

def test_default_lessons_cover_oxford_3000():
    lessons = build_lessons()

    assert len(lessons) == 112
    assert (lessons[0].word_start, lessons[0].word_end) == (0, 26)
    assert lessons[0].title == "Lesson 1"
    assert (lessons[-1].word_start, lessons[-1].word_end) == (2997, 2997)
    assert sum(lesson.size for lesson in lessons) == 2998


def test_build_lessons_edge_cases():
    assert build_lessons(0) == []
    assert [lesson.size for lesson in build_lessons(5, size=2)] == [2, 2, 1]
    with pytest.raises(ValueError):
        build_lessons(10, size=0)


def test_lesson_for_index():
    assert lesson_for_index(0) == 1
    assert lesson_for_index(26) == 1
    assert lesson_for_index(27) == 2
    with pytest.raises(ValueError):
        lesson_for_index(-1)


# ---- Metrics ----

def test_states_to_frame(states, t0):
    df = states_to_frame(states, t0 + timedelta(days=4))

    assert list(df["item_id"]) == ["1", "2", "3", "4"]
    assert df.loc[df["item_id"] == "1", "retrievability"].item() == pytest.approx(0.5)
    assert list(df["mastered"]) == [True, True, False, True]


def test_mastery_counts(states, t0):
    df = states_to_frame(states, t0)

    assert compute_mastered_count(df) == 3
    assert compute_mastery_percentage(df) == pytest.approx(75.0)
    assert compute_mastery_percentage(df, total=6) == pytest.approx(50.0)


def test_mastery_of_empty_collection(t0):
    df = states_to_frame({}, t0)

    assert compute_mastered_count(df) == 0
    assert compute_mastery_percentage(df) == 0.0


def test_lesson_mastery(states, items, t0):
    df = states_to_frame(states, t0)
    order = [item.id for item in items]

    result = compute_lesson_mastery(df, order, build_lessons(len(order), size=2))

    assert list(result["mastered"]) == [2, 1, 0]
    assert list(result["total"]) == [2, 2, 1]
    assert list(result["complete"]) == [True, False, False]


def test_category_mastery(states, items, t0):
    counts = compute_category_mastery(states_to_frame(states, t0), items)

    assert counts.to_dict() == {"verb": 2, "emotion": 0, "food": 1, "theme": 0}


def test_category_mastery_without_states(items, t0):
    counts = compute_category_mastery(states_to_frame({}, t0), items)

    assert counts.sum() == 0
    assert set(counts.index) == {"verb", "emotion", "food", "theme"}


# ---- Quests ----

def test_quest_progress_and_unlock():
    counts = {"verb": 7, "emotion": 1, "food": 4}

    quests = update_quest_progress(DEFAULT_QUESTS, pd.Series(counts))

    assert [q.progress for q in quests] == [5, 1, 4]
    assert [q.unlocked for q in quests] == [True, False, True]
    assert DEFAULT_QUESTS[0].progress == 0


def test_unlocked_quest_stays_unlocked():

    unlocked = [q.model_copy(update={"unlocked": True}) for q in DEFAULT_QUESTS]

    quests = update_quest_progress(unlocked, pd.Series(dtype="int64"))

    assert all(q.unlocked for q in quests)
    assert all(q.progress == 0 for q in quests)


# ---- Dashboard ----

def test_build_dashboard(states, items, t0):
    dashboard = build_dashboard(states, items, t0, lesson_size=2)

    assert dashboard.mastered == 3
    assert dashboard.total == 5
    assert dashboard.mastery_percentage == pytest.approx(60.0)
    assert dashboard.current_lesson == 2
    assert len(dashboard.lesson_mastery) == 3
    assert dashboard.category_mastery["verb"] == 2


def test_dashboard_lessons_stop_at_word_cap(t0):
    items = [VocabularyItem(id=i, text=f"w{i}") for i in range(3010)]

    dashboard = build_dashboard({}, items, t0)

    assert len(dashboard.lesson_mastery) == 112
    assert dashboard.lesson_mastery["total"].sum() == 2998
    assert dashboard.total == 3010
