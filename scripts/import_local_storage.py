"""
Import memory states exported from the browser front end.

The front end keeps one JSON object per word in local storage:
    {"<item_id>": {"stability": 4, "difficulty": 5,
                   "last_review_timestamp": 1718000000000, "review_count": 1}}

Timestamps may be epoch milliseconds or ISO-8601 strings. Every state is
validated before anything is written; one bad entry aborts the import.

Usage:
    python -m scripts.import_local_storage export.json [--user USER_ID] [--dry-run]
"""

import argparse
import json
from pathlib import Path

from lexigraph import fsrs
from lexigraph.logging_config import setup_logging


def load_states(path: Path) -> dict[str, fsrs.MemoryState]:
    """Parse and validate an exported local storage file."""
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a JSON object keyed by item id")

    states = {}
    for item_id, data in raw.items():
        try:
            states[str(item_id)] = fsrs.MemoryState.from_dict(data)
        except fsrs.InvalidStateError as exc:
            raise fsrs.InvalidStateError(f"Item {item_id}: {exc}") from exc
    return states


def main():
    parser = argparse.ArgumentParser(description="Import front-end memory states")
    parser.add_argument("path", type=Path, help="JSON export from local storage")
    parser.add_argument("--user", default=None, help="User id (defaults to DEFAULT_USER_ID)")
    parser.add_argument("--dry-run", action="store_true", help="Validate only, write nothing")
    args = parser.parse_args()

    setup_logging()
    states = load_states(args.path)
    print(f"Parsed {len(states)} memory states from {args.path}")

    if args.dry_run:
        print("[DRY RUN] No changes made.")
        return

    fsrs.init_db()
    fsrs.batch_save_memory_states(states, user_id=args.user)
    print(f"[OK] Imported {len(states)} memory states")


if __name__ == "__main__":
    main()
