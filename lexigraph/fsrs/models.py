"""
SQLAlchemy ORM Models for FSRS Persistence

Defines MemoryStateRecord and ReviewEvent tables.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MemoryStateRecord(Base):
    """
    Persistent memory state for a single vocabulary item of one user.
    """
    __tablename__ = 'memory_state'

    # Primary key: composite of user_id and item_id
    user_id = Column(String(255), primary_key=True, nullable=False)
    item_id = Column(String(255), primary_key=True, nullable=False)

    stability = Column(Float, nullable=False)
    difficulty = Column(Float, nullable=False)

    review_count = Column(Integer, nullable=False, default=0)
    last_review_timestamp = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<MemoryStateRecord({self.user_id}, {self.item_id}, S={self.stability}, D={self.difficulty})>"


class ReviewEvent(Base):
    """
    Log entry for a single grading event.

    Captures state before/after the review, the grade, and timing.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False, index=True)
    item_id = Column(String(255), nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    grade = Column(Integer, nullable=False)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    latency_ms = Column(Integer, nullable=True)
    days_since_review = Column(Float, nullable=True)

    # State before review (NULL for first review)
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    retrievability_before = Column(Float, nullable=True)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    review_count = Column(Integer, nullable=False)

    session_id = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.item_id}, grade={self.grade})>"
