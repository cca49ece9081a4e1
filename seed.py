"""
Idempotent seed script.
Usage:
  python seed.py --reset     # drop and recreate the DB, then load the demo timetable
  python seed.py             # fill in whatever demo data is missing
"""
from datetime import date
import argparse

from app import create_app
from extensions import db
from fixtures.demo_timetable import load_demo_timetable, load_time_slots


def main():
    parser = argparse.ArgumentParser(description="Seed the demo timetable")
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    parser.add_argument("--semester-start", type=date.fromisoformat, default=date(2025, 9, 1),
                        help="semester start date (YYYY-MM-DD)")
    args = parser.parse_args()

    app = create_app("dev")
    with app.app_context():
        if args.reset:
            db.drop_all()
        db.create_all()
        load_time_slots(app.config["DEFAULT_TIME_SLOTS"])
        sch = load_demo_timetable(args.semester_start, app.config["DEFAULT_WEEK_START_DAY"])
        db.session.commit()
        print(f"Seeded schedule #{sch.id} with {len(sch.courses)} courses")


if __name__ == "__main__":
    main()
