#!/usr/bin/env python3
"""
One-off static site build, outside the build queue (e.g. after a deploy or to debug templates).
Writes every club page to OUTPUT_DIR (or --output) and exits 1 when the build fails.

Run from the repository root:
  python scripts/build_site.py
  python scripts/build_site.py --output /tmp/preview
"""
import argparse
import logging
import sys
from pathlib import Path

repo_dir = Path(__file__).resolve().parent.parent
if str(repo_dir) not in sys.path:
    sys.path.insert(0, str(repo_dir))

from dotenv import load_dotenv

load_dotenv(repo_dir / ".env")

from clubportal.config import settings
from clubportal.core.errors import SiteBuildError
from clubportal.db.session import SessionLocal
from clubportal.services.club_service import all_clubs
from clubportal.site.builder import build_site
from clubportal.worker import build_options


def main():
    parser = argparse.ArgumentParser(description="Build the static club pages once.")
    parser.add_argument("--output", help="output directory (default: OUTPUT_DIR)")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    options = build_options(settings)
    if args.output:
        options.output_dir = args.output

    db = SessionLocal()
    try:
        clubs = all_clubs(db)
    except Exception as e:
        print(f"Error loading clubs: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    try:
        result = build_site(clubs, options)
    except SiteBuildError as e:
        print(f"Build failed: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Built {result.pages} pages for {result.clubs} clubs in {result.output_dir}")


if __name__ == "__main__":
    main()
