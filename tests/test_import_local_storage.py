import json

import pytest

from lexigraph import fsrs
from scripts.import_local_storage import load_states


def test_load_states_reads_front_end_export(tmp_path, t0):
    path = tmp_path / "export.json"
    path.write_text(json.dumps({
        "12": {"stability": 4, "difficulty": 5, "last_review_timestamp": 1_767_603_600_000, "review_count": 1},
        "13": {"stability": 1, "difficulty": 5, "last_review_timestamp": None, "review_count": 0},
    }), encoding="utf-8")

    states = load_states(path)

    assert states["12"] == fsrs.MemoryState(stability=4, difficulty=5, last_review_timestamp=t0, review_count=1)
    assert states["13"] == fsrs.new_memory_state()


def test_load_states_names_the_bad_item(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"7": {"difficulty": 99}}), encoding="utf-8")

    with pytest.raises(fsrs.InvalidStateError, match="Item 7"):
        load_states(path)


def test_load_states_requires_object(tmp_path):
    path = tmp_path / "export.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_states(path)


def test_load_states_rejects_out_of_range_timestamp(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"9": {"last_review_timestamp": 10**20, "review_count": 1}}), encoding="utf-8")

    with pytest.raises(fsrs.InvalidStateError, match="Item 9"):
        load_states(path)
