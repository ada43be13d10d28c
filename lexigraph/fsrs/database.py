"""
Database - FSRS Database I/O Operations

Handles all database operations for memory states and review events.
Uses SQLAlchemy ORM; any SQLAlchemy URL works (SQLite by default, Postgres
in production).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Mapping, Optional

from loguru import logger
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from lexigraph import config
from lexigraph.fsrs import scheduler
from lexigraph.fsrs.constants import R_TARGET, Grade
from lexigraph.fsrs.memory_state import MemoryState, new_memory_state, to_datetime
from lexigraph.fsrs.models import Base, MemoryStateRecord, ReviewEvent
from lexigraph.fsrs.queries import DueItem
from lexigraph.fsrs.queries import get_due_items as _select_due_items


@lru_cache(maxsize=None)
def _engine_for(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)
    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


def get_engine() -> Engine:
    """
    Get SQLAlchemy engine for the configured database.

    Engines are cached per URL so connection pools are reused.
    """
    return _engine_for(config.get_database_url())


def get_session() -> Session:
    """Get a SQLAlchemy session for database operations."""
    SessionLocal = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return SessionLocal()


def _resolve_user(user_id: Optional[str]) -> str:
    return user_id if user_id is not None else config.get_default_user_id()


def _utc(ts: Optional[datetime]) -> Optional[datetime]:
    if ts is None:
        return None
    return to_datetime(ts).astimezone(timezone.utc)


def _to_state(record: MemoryStateRecord) -> MemoryState:
    state = MemoryState(
        stability=record.stability,
        difficulty=record.difficulty,
        last_review_timestamp=_utc(record.last_review_timestamp),
        review_count=record.review_count,
    )
    return state.validate()


def init_db():
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times.
    """
    engine = get_engine()

    existing_tables = inspect(engine).get_table_names()
    if 'memory_state' in existing_tables and 'review_events' in existing_tables:
        columns = {col["name"] for col in inspect(engine).get_columns("memory_state")}
        if "user_id" not in columns or "item_id" not in columns:
            raise RuntimeError(
                "memory_state table is missing user_id/item_id columns. "
                "Please reset or migrate the database."
            )
        return

    Base.metadata.create_all(engine)
    logger.info("Created FSRS tables on {}", engine.url.render_as_string(hide_password=True))


def reset_db():
    """
    DANGEROUS: Delete all data and recreate tables.

    All review history will be lost!
    """
    engine = get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("Dropped all FSRS tables")

    init_db()


def load_memory_state(item_id: str, user_id: Optional[str] = None) -> Optional[MemoryState]:
    """
    Load memory state from database.

    Args:
        item_id: Vocabulary item identifier
        user_id: User identifier (defaults to DEFAULT_USER_ID)

    Returns:
        MemoryState if found, None if the item was never reviewed

    Raises:
        InvalidStateError: if the stored row violates an invariant
    """
    session = get_session()
    try:
        record = session.get(MemoryStateRecord, (_resolve_user(user_id), item_id))
        if record is None:
            return None
        return _to_state(record)
    finally:
        session.close()


def _upsert(session: Session, user_id: str, item_id: str, state: MemoryState):
    record = session.get(MemoryStateRecord, (user_id, item_id))
    if record is None:
        record = MemoryStateRecord(user_id=user_id, item_id=item_id)
        session.add(record)

    record.stability = state.stability
    record.difficulty = state.difficulty
    record.review_count = state.review_count
    record.last_review_timestamp = _utc(state.last_review_timestamp)


def save_memory_state(item_id: str, state: MemoryState, user_id: Optional[str] = None):
    """
    Save memory state to database (insert or update).

    Args:
        item_id: Vocabulary item identifier
        state: MemoryState to save (validated first)
        user_id: User identifier (defaults to DEFAULT_USER_ID)
    """
    state.validate()
    session = get_session()
    try:
        _upsert(session, _resolve_user(user_id), item_id, state)
        session.commit()
    finally:
        session.close()


def batch_save_memory_states(states: Mapping[str, MemoryState], user_id: Optional[str] = None):
    """
    Save multiple memory states in a single transaction.

    Args:
        states: MemoryState per item id
        user_id: User identifier (defaults to DEFAULT_USER_ID)
    """
    if not states:
        return

    for state in states.values():
        state.validate()

    resolved_user = _resolve_user(user_id)
    session = get_session()
    try:
        for item_id, state in states.items():
            _upsert(session, resolved_user, item_id, state)
        session.commit()
    finally:
        session.close()


def _to_review_event(event: dict, user_id: str) -> ReviewEvent:
    return ReviewEvent(
        user_id=event.get('user_id', user_id),
        item_id=event['item_id'],
        timestamp=_utc(event['timestamp']),
        grade=int(event['grade']),
        latency_ms=event.get('latency_ms'),
        days_since_review=event.get('days_since_review'),
        stability_before=event.get('stability_before'),
        difficulty_before=event.get('difficulty_before'),
        retrievability_before=event.get('retrievability_before'),
        stability_after=event['stability_after'],
        difficulty_after=event['difficulty_after'],
        review_count=event['review_count'],
        session_id=event.get('session_id'),
    )


def batch_log_review_events(events: list[dict], user_id: Optional[str] = None):
    """
    Log multiple review events in a single transaction.

    Args:
        events: Event dicts as returned by scheduler.process_review, with
            keys item_id, timestamp, grade, stability_after, difficulty_after,
            review_count and optional before-values, latency_ms, session_id
        user_id: User identifier (defaults to DEFAULT_USER_ID)
    """
    if not events:
        return

    resolved_user = _resolve_user(user_id)
    session = get_session()
    try:
        for event in events:
            session.add(_to_review_event(event, resolved_user))
        session.commit()
    finally:
        session.close()


def get_all_states(user_id: Optional[str] = None) -> dict[str, MemoryState]:
    """
    Get every stored memory state for a user.

    Returns:
        Mapping of item id to MemoryState
    """
    session = get_session()
    try:
        records = session.query(MemoryStateRecord).filter(
            MemoryStateRecord.user_id == _resolve_user(user_id)
        ).order_by(MemoryStateRecord.item_id).all()

        return {record.item_id: _to_state(record) for record in records}
    finally:
        session.close()


def get_due_items(
    now: Optional[datetime] = None,
    user_id: Optional[str] = None,
    r_target: float = R_TARGET
) -> list[DueItem]:
    """
    Get stored items with retrievability below threshold.

    Args:
        now: Current time (defaults to now, UTC)
        user_id: User identifier (defaults to DEFAULT_USER_ID)
        r_target: Retrievability threshold

    Returns:
        DueItems sorted most urgent first
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return _select_due_items(get_all_states(user_id), now, r_target)


def get_recent_events(limit: int = 10, user_id: Optional[str] = None) -> list[dict]:
    """
    Get recent review events.

    Args:
        limit: Maximum number of events to return
        user_id: User identifier (defaults to DEFAULT_USER_ID)

    Returns:
        List of recent events (newest first)
    """
    session = get_session()
    try:
        events = session.query(ReviewEvent).filter(
            ReviewEvent.user_id == _resolve_user(user_id)
        ).order_by(
            ReviewEvent.timestamp.desc(),
            ReviewEvent.id.desc()
        ).limit(limit).all()

        return [
            {
                "id": event.id,
                "user_id": event.user_id,
                "item_id": event.item_id,
                "timestamp": _utc(event.timestamp),
                "grade": Grade(event.grade),
                "latency_ms": event.latency_ms,
                "days_since_review": event.days_since_review,
                "stability_before": event.stability_before,
                "difficulty_before": event.difficulty_before,
                "retrievability_before": event.retrievability_before,
                "stability_after": event.stability_after,
                "difficulty_after": event.difficulty_after,
                "review_count": event.review_count,
                "session_id": event.session_id,
            }
            for event in events
        ]
    finally:
        session.close()


def review_item(
    item_id: str,
    grade: Grade,
    now: Optional[datetime] = None,
    user_id: Optional[str] = None,
    latency_ms: Optional[int] = None,
    session_id: Optional[str] = None
) -> MemoryState:
    """
    Load-or-create, grade, save and log a review in one transaction.

    Args:
        item_id: Vocabulary item identifier
        grade: User grade (AGAIN, HARD, GOOD, EASY)
        now: Review timestamp (defaults to now, UTC)
        user_id: User identifier (defaults to DEFAULT_USER_ID)
        latency_ms: Response time in milliseconds (optional)
        session_id: Study session id (optional)

    Returns:
        The saved MemoryState
    """
    if now is None:
        now = datetime.now(timezone.utc)
    resolved_user = _resolve_user(user_id)

    state = load_memory_state(item_id, resolved_user) or new_memory_state()
    new_state, event_data = scheduler.process_review(state, grade, now, item_id=item_id)
    event_data['latency_ms'] = latency_ms
    event_data['session_id'] = session_id

    # State and event commit together or not at all
    session = get_session()
    try:
        _upsert(session, resolved_user, item_id, new_state)
        session.add(_to_review_event(event_data, resolved_user))
        session.commit()
    finally:
        session.close()
    return new_state
