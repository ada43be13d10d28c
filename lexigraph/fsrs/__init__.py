"""
FSRS - Free Spaced Repetition Scheduler

Main API for the vocabulary graph.

This package implements a small, deterministic review scheduler with:
- Immutable per-item memory state (Stability, Difficulty, review history)
- Power-law stability growth on successful recall, fixed decay on lapses
- Forgetting curve: R = 2 ** (-Δt/S)

Quick start:
    from lexigraph import fsrs

    # Grade a review (algorithm only, no DB calls)
    state = fsrs.grade(fsrs.new_memory_state(), fsrs.Grade.GOOD, now)

    # Or with persistence
    fsrs.init_db()
    fsrs.review_item("word-42", fsrs.Grade.EASY)
    due = fsrs.get_due_items()
"""

# Core scheduler API (algorithm logic)
from lexigraph.fsrs.scheduler import coerce_grade, grade, process_review

# Database API
from lexigraph.fsrs.database import (
    init_db,
    reset_db,
    load_memory_state,
    save_memory_state,
    batch_save_memory_states,
    batch_log_review_events,
    get_all_states,
    get_due_items,
    get_recent_events,
    review_item,
)

# Constants and parameters
from lexigraph.fsrs.constants import (
    Grade,
    R_TARGET,
    S_MIN,
    D_MIN,
    D_MAX,
    DEFAULT_STABILITY,
    DEFAULT_DIFFICULTY,
    FIRST_SUCCESS_STABILITY,
    EASY_GAIN,
    SPACING_DECAY,
    LAPSE_DECAY,
    DIFFICULTY_DELTA,
    MASTERY_STABILITY,
)

# Errors
from lexigraph.fsrs.errors import (
    SchedulerError,
    InvalidGradeError,
    InvalidStateError,
    OutOfOrderReviewError,
)

# Memory state (for advanced usage)
from lexigraph.fsrs.memory_state import (
    MemoryState,
    new_memory_state,
    calculate_retrievability,
    get_days_since_review,
    retrievability,
    next_review_at,
    is_due,
    is_mastered,
)
from lexigraph.fsrs.queries import DueItem


__all__ = [
    # Core algorithm
    "grade",
    "process_review",
    "coerce_grade",

    # Database operations
    "init_db",
    "reset_db",
    "load_memory_state",
    "save_memory_state",
    "batch_save_memory_states",
    "batch_log_review_events",
    "get_all_states",
    "get_due_items",
    "get_recent_events",
    "review_item",

    # Enums
    "Grade",

    # Errors
    "SchedulerError",
    "InvalidGradeError",
    "InvalidStateError",
    "OutOfOrderReviewError",

    # Memory state
    "MemoryState",
    "DueItem",
    "new_memory_state",
    "calculate_retrievability",
    "get_days_since_review",
    "retrievability",
    "next_review_at",
    "is_due",
    "is_mastered",

    # Parameters
    "R_TARGET",
    "S_MIN",
    "D_MIN",
    "D_MAX",
    "DEFAULT_STABILITY",
    "DEFAULT_DIFFICULTY",
    "FIRST_SUCCESS_STABILITY",
    "EASY_GAIN",
    "SPACING_DECAY",
    "LAPSE_DECAY",
    "DIFFICULTY_DELTA",
    "MASTERY_STABILITY",
]
