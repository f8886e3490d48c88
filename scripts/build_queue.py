#!/usr/bin/env python3
"""
Inspect or nudge the site build task.

  python scripts/build_queue.py status    # show the task row
  python scripts/build_queue.py enqueue   # request a rebuild now (same as "publish now")
  python scripts/build_queue.py reset     # running -> pending, e.g. after the worker was killed mid-build

Run from the repository root. Safe while the web app and worker are running.
"""
import argparse
import sys
from datetime import timedelta
from pathlib import Path

repo_dir = Path(__file__).resolve().parent.parent
if str(repo_dir) not in sys.path:
    sys.path.insert(0, str(repo_dir))

from dotenv import load_dotenv

load_dotenv(repo_dir / ".env")

from clubportal.db.session import SessionLocal
from clubportal.services.build_queue import enqueue_build_task, get_build_task, reset_build_task


def _print_status(db):
    task = get_build_task(db)
    if task is None:
        print("No build task yet (nothing was ever enqueued).")
        return
    print(f"status:        {task.status}")
    print(f"next_run_at:   {task.next_run_at}")
    print(f"last_event_at: {task.last_event_at}")
    print(f"claimed_at:    {task.claimed_at}")
    print(f"attempts:      {task.attempts}")
    if task.last_error:
        print(f"last_error:    {task.last_error}")


def main():
    parser = argparse.ArgumentParser(description="Inspect or nudge the site build task.")
    parser.add_argument("command", choices=["status", "enqueue", "reset"])
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if args.command == "enqueue":
            enqueue_build_task(db, timedelta(0))
            print("Rebuild requested.")
        elif args.command == "reset":
            if reset_build_task(db):
                print("Running task reset to pending; the worker picks it up on its next poll.")
            else:
                print("Task was not running; nothing to reset.")
        _print_status(db)
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
