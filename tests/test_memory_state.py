import math
from datetime import datetime, timedelta, timezone

import pytest

from lexigraph import fsrs
from lexigraph.fsrs.memory_state import to_datetime, to_epoch_ms


def test_new_memory_state_defaults():
    state = fsrs.new_memory_state()

    assert state.stability == 1.0
    assert state.difficulty == 5.0
    assert state.last_review_timestamp is None
    assert state.review_count == 0
    assert state.is_new


def test_memory_state_is_immutable(new_state):
    with pytest.raises(AttributeError):
        new_state.stability = 3.0


def test_retrievability_halves_every_stability_interval():
    assert fsrs.calculate_retrievability(5.0, 0) == 1.0
    assert fsrs.calculate_retrievability(5.0, 5.0) == pytest.approx(0.5)
    assert fsrs.calculate_retrievability(5.0, 10.0) == pytest.approx(0.25)


def test_retrievability_is_one_for_unreviewed(new_state, t0):
    assert fsrs.retrievability(new_state, t0) == 1.0


def test_retrievability_decays_over_time(reviewed_state, t0):
    values = [fsrs.retrievability(reviewed_state, t0 + timedelta(days=d)) for d in range(0, 20, 2)]

    assert values[0] == 1.0
    assert all(0.0 <= v <= 1.0 for v in values)
    assert values == sorted(values, reverse=True)


def test_days_since_review(t0):
    assert fsrs.get_days_since_review(None, t0) == 0.0
    assert fsrs.get_days_since_review(t0, t0 + timedelta(hours=36)) == pytest.approx(1.5)


def test_next_review_at_hits_target_retrievability(reviewed_state, t0):
    due = fsrs.next_review_at(reviewed_state)

    assert due == t0 + timedelta(days=4 * math.log2(1 / 0.9))
    assert fsrs.retrievability(reviewed_state, due) == pytest.approx(fsrs.R_TARGET)


def test_next_review_at_none_for_unreviewed(new_state):
    assert fsrs.next_review_at(new_state) is None


@pytest.mark.parametrize("r_target", [0.0, 1.0, 1.5])
def test_next_review_at_rejects_bad_target(reviewed_state, r_target):
    with pytest.raises(ValueError):
        fsrs.next_review_at(reviewed_state, r_target)


def test_is_due(reviewed_state, new_state, t0):
    assert fsrs.is_due(new_state, t0)
    assert not fsrs.is_due(reviewed_state, t0 + timedelta(hours=12))
    assert fsrs.is_due(reviewed_state, t0 + timedelta(days=1))


def test_is_mastered():
    assert fsrs.is_mastered(fsrs.MemoryState(stability=4.0))
    assert not fsrs.is_mastered(fsrs.MemoryState(stability=0.7))
    assert not fsrs.is_mastered(fsrs.MemoryState(stability=0.8))


# ---- Timestamps ----

def test_to_datetime_accepts_epoch_ms_and_iso(t0):
    ms = to_epoch_ms(t0)

    assert to_datetime(ms) == t0
    assert to_datetime(t0.isoformat()) == t0
    assert to_datetime(t0.replace(tzinfo=None)) == t0


@pytest.mark.parametrize("value", [True, object(), [1]])
def test_to_datetime_rejects_garbage(value):
    with pytest.raises(TypeError):
        to_datetime(value)


# ---- Persistence contract ----

def test_dict_round_trip_keeps_state(t0):
    state = fsrs.MemoryState(stability=6.9, difficulty=4.5, last_review_timestamp=t0, review_count=2)

    data = state.to_dict()

    assert data == {
        "stability": 6.9,
        "difficulty": 4.5,
        "last_review_timestamp": "2026-01-05T09:00:00+00:00",
        "review_count": 2,
    }
    assert fsrs.MemoryState.from_dict(data) == state


def test_from_dict_reads_front_end_epoch_ms():
    state = fsrs.MemoryState.from_dict({
        "stability": 4,
        "difficulty": 5,
        "last_review_timestamp": 1_767_603_600_000,
        "review_count": 1,
    })

    assert state.last_review_timestamp == datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


def test_from_dict_fills_defaults():
    assert fsrs.MemoryState.from_dict({}) == fsrs.new_memory_state()


@pytest.mark.parametrize("data", [
    {"difficulty": 11},
    {"stability": -1},
    {"review_count": 1.5, "last_review_timestamp": "2026-01-05T09:00:00+00:00"},
    {"last_review_timestamp": "yesterday"},
    {"last_review_timestamp": 10**20, "review_count": 1},
    {"last_review_timestamp": float("inf"), "review_count": 1},
    {"last_review_timestamp": -10**20, "review_count": 1},
])
def test_from_dict_rejects_invalid(data):
    with pytest.raises(fsrs.InvalidStateError):
        fsrs.MemoryState.from_dict(data)


@pytest.mark.parametrize("value", [10**20, float("inf"), -10**20])
def test_to_datetime_out_of_range_epoch_is_value_error(value):
    with pytest.raises(ValueError):
        to_datetime(value)
