"""Create the enrollment schema and optionally resync class seat counters.

Usage:
  python scripts/init_db.py
  python scripts/init_db.py --reset          # drop and recreate every table
  python scripts/init_db.py --resync-seats   # recount seats_taken from registrations
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func

from enrollment.database import Base, SessionLocal, atomic, engine
import enrollment.models  # noqa: F401 - registers all models
from enrollment.models.course import TrainingClass
from enrollment.models.registration import Registration, REG_CANCELLED


def resync_seats() -> int:
    """Rewrite every class's seats_taken from its active registration count."""
    db = SessionLocal()
    changed = 0
    try:
        counts = dict(
            db.query(Registration.class_id, func.count(Registration.registration_id))
            .filter(Registration.reg_status != REG_CANCELLED)
            .group_by(Registration.class_id)
            .all()
        )
        with atomic(db):
            for training_class in db.query(TrainingClass).all():
                active = counts.get(training_class.class_id, 0)
                if training_class.seats_taken != active:
                    print(f"  class {training_class.class_id}: seats_taken {training_class.seats_taken} -> {active}")
                    training_class.seats_taken = active
                    changed += 1
    finally:
        db.close()
    return changed


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    parser.add_argument("--resync-seats", action="store_true", help="Recount seats_taken per class")
    args = parser.parse_args()

    if args.reset:
        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print(f"Schema ready: {', '.join(sorted(Base.metadata.tables))}")

    if args.resync_seats:
        print(f"Seat counters updated: {resync_seats()}")


if __name__ == "__main__":
    main()
