#!/usr/bin/env python3
"""
Quick checks so the web app and the build worker can start. Run from the repository root:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

repo_dir = Path(__file__).resolve().parent.parent
os.chdir(repo_dir)
if str(repo_dir) not in sys.path:
    sys.path.insert(0, str(repo_dir))


def main():
    errors = []

    # 1) .env
    env_file = repo_dir / ".env"
    if not env_file.exists():
        print("INFO .env missing; using defaults (SQLite under ./data, dev SECRET_KEY)")
    else:
        print("OK  .env exists")

    # 2) DB connection and schema
    try:
        from sqlalchemy import inspect, text
        from clubportal.db.session import engine
        from clubportal.db.tables import ALL_TABLE_NAMES
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = sorted(set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names()))
        if missing:
            print("INFO Missing tables (created on startup when AUTO_CREATE_SCHEMA=true):", ", ".join(missing))
        else:
            print("OK  Schema present")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) Site templates and assets
    from clubportal.config import settings
    for label, path in (("Site templates", settings.template_dir), ("Site assets", settings.asset_dir)):
        if Path(path).is_dir():
            print(f"OK  {label} ({path})")
        else:
            errors.append(f"{label} directory {path} does not exist.")
            print(f"FAIL {label} missing:", path)

    # 4) App import (catches missing deps, bad imports)
    try:
        from clubportal.main import app  # noqa: F401
        from clubportal.worker import main as worker_main  # noqa: F401
        print("OK  App import (clubportal.main, clubportal.worker)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    # 5) Port 8000
    try:
        import socket
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with:")
    print("  uvicorn clubportal.main:app --reload   # web")
    print("  clubportal-worker                      # build worker (exactly one)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
