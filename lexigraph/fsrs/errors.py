"""
Scheduler errors.

The scheduler is pure arithmetic over validated input, so every error here
is a caller bug rather than a transient condition.
"""


class SchedulerError(Exception):
    """Base class for review scheduler errors."""


class InvalidGradeError(SchedulerError, ValueError):
    """Grade is not one of AGAIN, HARD, GOOD, EASY (1-4)."""

    def __init__(self, grade):
        self.grade = grade
        super().__init__(f"Invalid grade {grade!r}: expected one of 1, 2, 3, 4")


class InvalidStateError(SchedulerError, ValueError):
    """Memory state violates an invariant (usually corrupt persisted data)."""


class OutOfOrderReviewError(InvalidStateError):
    """Review timestamp is earlier than the state's last review."""

    def __init__(self, last_review_timestamp, now):
        self.last_review_timestamp = last_review_timestamp
        self.now = now
        super().__init__(
            f"Review at {now.isoformat()} is earlier than last review "
            f"at {last_review_timestamp.isoformat()}"
        )
