"""
Drop and recreate the lexigraph tables.

Wipes memory states and the review log for every user in the configured
DATABASE_URL, not only DEFAULT_USER_ID.

Usage:
    python -m scripts.reset_learning_db [--yes]
"""

import argparse

from lexigraph import config, fsrs
from lexigraph.logging_config import setup_logging


def describe_target() -> str:
    """One-line summary of what a reset would wipe."""
    users = "all users" if not config.is_test_mode() else "all users (TEST_MODE)"
    return f"{config.get_database_url()} - {users}"


def main():
    parser = argparse.ArgumentParser(description="Reset the lexigraph review database")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    setup_logging()

    print(f"Target: {describe_target()}")
    print("Every memory state and logged review event will be deleted.")

    if not args.yes:
        response = input("Type the word 'reset' to continue: ")
        if response.strip().lower() != "reset":
            print("Nothing deleted.")
            return

    fsrs.reset_db()
    print("[OK] Tables recreated empty.")


if __name__ == "__main__":
    main()
