"""Seed the database with sample courses, classes and accounts."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, timedelta
from enrollment.database import SessionLocal, engine, Base
import enrollment.models  # noqa: F401

from enrollment.models.user import User, Participant, Instructor
from enrollment.models.course import Course, TrainingClass


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Users
        users = [
            User(email="admin@train4best.local", username="admin", role="admin"),
            User(email="instructor1@train4best.local", username="instructor1", role="instructor"),
            User(email="participant1@train4best.local", username="participant1", role="participant"),
            User(email="participant2@train4best.local", username="participant2", role="participant"),
        ]
        db.add_all(users)
        db.flush()

        db.add(Instructor(user_id=users[1].user_id, full_name="Budi Santoso", proficiency="Network Security"))
        db.add_all([
            Participant(user_id=users[2].user_id, full_name="Siti Rahma", company="PT Maju", job_title="Engineer"),
            Participant(user_id=users[3].user_id, full_name="Andi Wijaya", company="PT Jaya", job_title="Analyst"),
        ])

        # Courses
        courses = [
            Course(course_name="Cisco CCNA", course_type="Networking"),
            Course(course_name="ITIL 4 Foundation", course_type="Service Management"),
        ]
        db.add_all(courses)
        db.flush()

        today = date.today()
        classes = [
            TrainingClass(
                course_id=courses[0].course_id,
                quota=20,
                price=5_000_000,
                start_reg_date=today - timedelta(days=7),
                end_reg_date=today + timedelta(days=21),
                start_date=today + timedelta(days=30),
                end_date=today + timedelta(days=34),
                duration_day=5,
                location="Jakarta",
                room="Room A",
            ),
            TrainingClass(
                course_id=courses[1].course_id,
                quota=2,
                price=3_500_000,
                start_reg_date=today,
                end_reg_date=today + timedelta(days=14),
                start_date=today + timedelta(days=20),
                end_date=today + timedelta(days=22),
                duration_day=3,
                location="Online",
            ),
        ]
        db.add_all(classes)
        db.commit()
        print("Seed data inserted successfully.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
