#!/usr/bin/env python3
"""
Script pour passer en retard les échéances PENDING dont la date est dépassée
A lancer périodiquement (cron), par exemple une fois par jour:

    python mark_overdue.py
    python mark_overdue.py --date 2024-03-01
"""
import argparse
import logging
import os
import sys
from datetime import date, datetime

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from database import SessionLocal
from services.rent_service import mark_overdue


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Passe en OVERDUE les échéances en retard")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Date de référence (YYYY-MM-DD), aujourd'hui par défaut",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    now = args.date or datetime.now()

    db = SessionLocal()
    try:
        count = mark_overdue(db, now)
    finally:
        db.close()

    print(f"{count} échéance(s) passée(s) en retard")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    sys.exit(main())
