"""
Scheduler - Review Grading Logic

Pure scheduling and state updates (no database calls, no clock reads).

Main workflow:
1. Load memory state (caller's responsibility)
2. Validate grade, state and review time
3. Apply the update law
4. Return the new state (+ event data dict for process_review)

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Optional, Tuple

from loguru import logger

from lexigraph.fsrs import memory_state, updates
from lexigraph.fsrs.constants import Grade
from lexigraph.fsrs.errors import InvalidGradeError, OutOfOrderReviewError


def coerce_grade(value) -> Grade:
    """
    Convert a raw grade (Grade or int 1-4) into a Grade.

    Raises:
        InvalidGradeError: for anything outside the closed set
    """
    if isinstance(value, Grade):
        return value
    if isinstance(value, bool):
        raise InvalidGradeError(value)
    try:
        return Grade(value)
    except (ValueError, TypeError) as exc:
        raise InvalidGradeError(value) from exc


def grade(
    state: memory_state.MemoryState,
    grade: Grade,
    now: datetime
) -> memory_state.MemoryState:
    """
    Compute the next memory state for a graded review.

    Pure function: the input state is not modified and the same
    (state, grade, now) always yields the same result.

    Args:
        state: Current MemoryState (new_memory_state() for unseen items)
        grade: AGAIN, HARD, GOOD or EASY
        now: Instant of the review

    Returns:
        New MemoryState with review_count + 1 and last_review_timestamp = now

    Raises:
        InvalidGradeError: grade is not 1-4
        InvalidStateError: state violates an invariant
        OutOfOrderReviewError: now is earlier than the last review
    """
    return _apply_grade(state, coerce_grade(grade), now)


def process_review(
    state: memory_state.MemoryState,
    grade: Grade,
    now: datetime,
    item_id: Optional[str] = None
) -> Tuple[memory_state.MemoryState, dict]:
    """
    Grade a review and return updated state + event data.

    Caller is responsible for:
    1. Loading the state
    2. Saving the state after review
    3. Persisting the event

    Args:
        state: MemoryState to update (may be new or existing)
        grade: User grade (AGAIN, HARD, GOOD, EASY)
        now: Review timestamp
        item_id: Vocabulary item id, copied into the event

    Returns:
        Tuple of (new_state, event_data_dict)
        event_data_dict is ready to pass to database.batch_log_review_events()
    """
    feedback_grade = coerce_grade(grade)
    new_state = _apply_grade(state, feedback_grade, now)

    is_new_item = state.is_new
    event_data = {
        'item_id': item_id,
        'timestamp': new_state.last_review_timestamp,
        'grade': feedback_grade,
        'days_since_review': None if is_new_item else _days_since(state, now),
        'stability_before': None if is_new_item else state.stability,
        'difficulty_before': None if is_new_item else state.difficulty,
        'retrievability_before': (
            None if is_new_item else memory_state.retrievability(state, now)
        ),
        'stability_after': new_state.stability,
        'difficulty_after': new_state.difficulty,
        'review_count': new_state.review_count,
        'latency_ms': None,  # Will be set by caller if needed
        'session_id': None,  # Will be set by caller if needed
    }

    return new_state, event_data


def _days_since(state: memory_state.MemoryState, now: datetime) -> float:
    if state.is_new:
        return 0.0
    return memory_state.get_days_since_review(state.last_review_timestamp, now)


def _apply_grade(
    state: memory_state.MemoryState,
    feedback_grade: Grade,
    now: datetime
) -> memory_state.MemoryState:
    state.validate()
    now = memory_state.to_datetime(now)

    if state.last_review_timestamp is not None:
        last_ts = memory_state.to_datetime(state.last_review_timestamp)
        if now < last_ts:
            raise OutOfOrderReviewError(last_ts, now)

    days_since = _days_since(state, now)

    new_stability, new_difficulty = updates.apply_update(
        stability=state.stability,
        difficulty=state.difficulty,
        days_since_review=days_since,
        grade=feedback_grade,
        is_first_review=state.is_new
    )

    logger.debug(
        "Graded {} after {:.2f}d: S {} -> {}, D {} -> {}",
        feedback_grade.name,
        days_since,
        state.stability,
        new_stability,
        state.difficulty,
        new_difficulty,
    )

    return dataclasses.replace(
        state,
        stability=new_stability,
        difficulty=new_difficulty,
        last_review_timestamp=now,
        review_count=state.review_count + 1,
    )
