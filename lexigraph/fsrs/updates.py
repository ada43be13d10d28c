"""
Stability and Difficulty Updates

Implements the grading update law.

Key principles:
- Successful recall after a longer gap grows stability more, with
  diminishing returns
- EASY grows stability, GOOD holds it, a lapse shrinks it by a fixed decay
- Difficulty moves by a fixed step per grade, independent of elapsed time
"""

from __future__ import annotations

from lexigraph.fsrs.constants import (
    D_MAX,
    D_MIN,
    DIFFICULTY_DELTA,
    EASY_GAIN,
    FIRST_SUCCESS_STABILITY,
    LAPSE_DECAY,
    S_MIN,
    SPACING_DECAY,
    STABILITY_DECIMALS,
    Grade,
)


def is_success(grade: Grade) -> bool:
    """GOOD and EASY count as successful recall; AGAIN and HARD are lapses."""
    return grade >= Grade.GOOD


def update_stability_on_success(
    stability: float,
    days_since_review: float,
    grade: Grade,
    is_first_review: bool = False
) -> float:
    """
    Update stability after successful retrieval (GOOD/EASY).

    Formula:
        S_new = S * (1 + (grade - 3) * EASY_GAIN * (Δt + 1) ** SPACING_DECAY)

    Special case for the first review:
        S_new = FIRST_SUCCESS_STABILITY, whatever S was

    Args:
        stability: Current stability (S)
        days_since_review: Days since the last review (Δt)
        grade: GOOD or EASY
        is_first_review: True if the item has never been graded

    Returns:
        New stability value (unrounded)
    """
    if not is_success(grade):
        raise ValueError("Use update_stability_on_failure for AGAIN/HARD")

    if is_first_review:
        return FIRST_SUCCESS_STABILITY

    spacing = (days_since_review + 1.0) ** SPACING_DECAY
    growth = (int(grade) - int(Grade.GOOD)) * EASY_GAIN * spacing
    return stability * (1.0 + growth)


def update_stability_on_failure(stability: float) -> float:
    """
    Update stability after a lapse (AGAIN/HARD).

    Formula:
        S_new = max(S_MIN, S * LAPSE_DECAY)
    """
    return max(S_MIN, stability * LAPSE_DECAY)


def update_difficulty(difficulty: float, grade: Grade) -> float:
    """
    Shift difficulty by the fixed per-grade step and clip to [1, 10].

    GOOD leaves difficulty untouched.
    """
    new_difficulty = difficulty + DIFFICULTY_DELTA[grade]
    return max(D_MIN, min(D_MAX, new_difficulty))


def round_stability(stability: float) -> float:
    """Round to one decimal, never below the lapse floor."""
    return max(S_MIN, round(stability, STABILITY_DECIMALS))


def apply_update(
    stability: float,
    difficulty: float,
    days_since_review: float,
    grade: Grade,
    is_first_review: bool = False
) -> tuple[float, float]:
    """
    Apply the full update law to get new S and D.

    This is the main entry point for updates.

    Returns:
        (new_stability, new_difficulty)
    """
    if is_success(grade):
        new_stability = update_stability_on_success(
            stability, days_since_review, grade, is_first_review
        )
    else:
        new_stability = update_stability_on_failure(stability)

    new_difficulty = update_difficulty(difficulty, grade)

    return round_stability(new_stability), new_difficulty
