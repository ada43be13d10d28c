"""
FSRS Constants and Parameters

All configurable parameters for the review scheduler in one place.
"""

from enum import IntEnum


# ---- Grades ----

class Grade(IntEnum):
    """Learner's self-reported recall quality."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort (counted as a lapse)
    GOOD = 3    # Retrieved adequately
    EASY = 4    # Retrieved fluently


# ---- Default Memory State ----

DEFAULT_STABILITY = 1.0    # Days, for a never-reviewed item
DEFAULT_DIFFICULTY = 5.0   # Middle of the 1-10 scale


# ---- Global Constants ----

R_TARGET = 0.90   # Reference retrievability; below this an item is "due"
S_MIN = 0.5       # Stability floor on lapse (days)
D_MIN = 1.0       # Minimum difficulty
D_MAX = 10.0      # Maximum difficulty

MS_PER_DAY = 86_400_000
SECONDS_PER_DAY = 86_400.0


# ---- Learning Parameters ----

FIRST_SUCCESS_STABILITY = 4.0   # Stability after the first successful review
EASY_GAIN = 0.9                 # Growth per grade step above GOOD
SPACING_DECAY = -0.3            # Exponent on (days_since + 1)
LAPSE_DECAY = 0.7               # Stability multiplier on AGAIN/HARD
STABILITY_DECIMALS = 1


# ---- Difficulty Update by Grade ----

DIFFICULTY_DELTA = {
    Grade.AGAIN: +0.8,
    Grade.HARD: +0.3,
    Grade.GOOD: 0.0,
    Grade.EASY: -0.5,
}


# ---- Application Thresholds ----

# Dashboard filter for "mastered" words
MASTERY_STABILITY = 0.8

# Lessons are fixed blocks of consecutive words (Oxford 3000)
LESSON_SIZE = 27
MAX_WORD_INDEX = 2997
