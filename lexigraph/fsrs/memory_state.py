"""
Memory State - Per-item FSRS state and retrievability

Defines the durable memory record the scheduler takes and returns by value,
plus the derived quantities computed from it.

Key concepts:
- Stability (S): days until retrievability decays to R_TARGET
- Difficulty (D): how hard the item is to learn (1-10 scale)
- Retrievability (R): probability of successful recall at time t
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from lexigraph.fsrs.constants import (
    D_MAX,
    D_MIN,
    DEFAULT_DIFFICULTY,
    DEFAULT_STABILITY,
    MASTERY_STABILITY,
    R_TARGET,
    S_MIN,
    SECONDS_PER_DAY,
)
from lexigraph.fsrs.errors import InvalidStateError

Timestamp = Union[datetime, int, float, str]


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single vocabulary item.

    Immutable: the scheduler returns a new state for every review.
    """
    stability: float = DEFAULT_STABILITY  # S, in days
    difficulty: float = DEFAULT_DIFFICULTY  # D, range 1-10
    last_review_timestamp: Optional[datetime] = None  # None until first review
    review_count: int = 0

    @property
    def is_new(self) -> bool:
        return self.review_count == 0

    def validate(self) -> "MemoryState":
        """
        Check every invariant and return self.

        Raises:
            InvalidStateError: if any field is out of range
        """
        if not _is_number(self.stability) or not math.isfinite(self.stability):
            raise InvalidStateError(f"stability must be a finite number, got {self.stability!r}")
        # Every reachable state sits at or above the lapse floor
        if self.stability < S_MIN:
            raise InvalidStateError(f"stability {self.stability} is below the floor of {S_MIN}")

        if not _is_number(self.difficulty) or not math.isfinite(self.difficulty):
            raise InvalidStateError(f"difficulty must be a finite number, got {self.difficulty!r}")
        if not D_MIN <= self.difficulty <= D_MAX:
            raise InvalidStateError(
                f"difficulty {self.difficulty} is outside [{D_MIN:g}, {D_MAX:g}]"
            )

        if isinstance(self.review_count, bool) or not isinstance(self.review_count, int):
            raise InvalidStateError(f"review_count must be an int, got {self.review_count!r}")
        if self.review_count < 0:
            raise InvalidStateError(f"review_count must be >= 0, got {self.review_count}")

        if self.last_review_timestamp is not None and not isinstance(self.last_review_timestamp, datetime):
            raise InvalidStateError(
                f"last_review_timestamp must be a datetime or None, got {self.last_review_timestamp!r}"
            )
        if self.review_count > 0 and self.last_review_timestamp is None:
            raise InvalidStateError(
                f"review_count is {self.review_count} but last_review_timestamp is unset"
            )
        return self

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict for host-side storage."""
        return {
            "stability": self.stability,
            "difficulty": self.difficulty,
            "last_review_timestamp": (
                self.last_review_timestamp.isoformat()
                if self.last_review_timestamp is not None
                else None
            ),
            "review_count": self.review_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryState":
        """
        Rebuild a state from a stored dict.

        Missing keys take their defaults. `last_review_timestamp` may be an
        ISO-8601 string, epoch milliseconds, a datetime, or None. The result
        is validated, never repaired.
        """
        if not isinstance(data, dict):
            raise InvalidStateError(f"Expected a dict, got {type(data).__name__}")

        raw_ts = data.get("last_review_timestamp")
        try:
            last_ts = to_datetime(raw_ts) if raw_ts is not None else None
        except (TypeError, ValueError) as exc:
            raise InvalidStateError(f"Unparsable last_review_timestamp {raw_ts!r}") from exc

        state = cls(
            stability=data.get("stability", DEFAULT_STABILITY),
            difficulty=data.get("difficulty", DEFAULT_DIFFICULTY),
            last_review_timestamp=last_ts,
            review_count=data.get("review_count", 0),
        )
        return state.validate()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def new_memory_state() -> MemoryState:
    """State for an item that has never been graded."""
    return MemoryState()


def to_datetime(value: Timestamp) -> datetime:
    """
    Normalize a timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), epoch milliseconds as
    produced by the browser front end, and ISO-8601 strings.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, bool):
        raise TypeError(f"Cannot interpret {value!r} as a timestamp")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"Epoch milliseconds {value!r} out of range") from exc
    if isinstance(value, str):
        return to_datetime(datetime.fromisoformat(value))
    raise TypeError(f"Cannot interpret {value!r} as a timestamp")


def to_epoch_ms(value: datetime) -> int:
    """Inverse of `to_datetime` for numeric timestamps."""
    return int(round(to_datetime(value).timestamp() * 1000))


def get_days_since_review(
    last_review_timestamp: Optional[datetime],
    now: datetime
) -> float:
    """
    Calculate days elapsed since the last review.

    Args:
        last_review_timestamp: Timestamp of last review, or None for new items
        now: Current time, supplied by the caller

    Returns:
        Days since review (0 if never reviewed)
    """
    if last_review_timestamp is None:
        return 0.0

    delta = to_datetime(now) - to_datetime(last_review_timestamp)
    return delta.total_seconds() / SECONDS_PER_DAY


def calculate_retrievability(stability: float, days_since_review: float) -> float:
    """
    Calculate retrievability using the FSRS forgetting curve.

    Formula: R = 2 ** (-Δt / S)

    Immediately after a review R = 1.0; it halves every S days.

    Args:
        stability: Current stability in days
        days_since_review: Time since last review in days

    Returns:
        Retrievability between 0 and 1
    """
    if days_since_review <= 0:
        return 1.0

    return 2.0 ** (-days_since_review / stability)


def retrievability(state: MemoryState, now: datetime) -> float:
    """Current recall probability for an item (1.0 if never reviewed)."""
    if state.is_new or state.last_review_timestamp is None:
        return 1.0
    days_since = get_days_since_review(state.last_review_timestamp, now)
    return calculate_retrievability(state.stability, days_since)


def next_review_at(state: MemoryState, r_target: float = R_TARGET) -> Optional[datetime]:
    """
    Instant at which retrievability falls to r_target.

    Solves 2 ** (-Δt / S) = r_target for Δt. None for unreviewed items,
    which are always due.
    """
    if not 0.0 < r_target < 1.0:
        raise ValueError(f"r_target must be in (0, 1), got {r_target}")
    if state.is_new or state.last_review_timestamp is None:
        return None

    interval_days = state.stability * math.log2(1.0 / r_target)
    return to_datetime(state.last_review_timestamp) + timedelta(days=interval_days)


def is_due(state: MemoryState, now: datetime, r_target: float = R_TARGET) -> bool:
    """Unreviewed items are always due; others once R drops below r_target."""
    if state.is_new:
        return True
    return retrievability(state, now) < r_target


def is_mastered(state: MemoryState, threshold: float = MASTERY_STABILITY) -> bool:
    """Dashboard-level "mastered" filter on stability."""
    return state.stability > threshold
