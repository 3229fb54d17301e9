import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from enrollment.database import Base, build_engine, get_db
from enrollment.main import app
from enrollment.models.user import User, Participant, Instructor
from enrollment.models.course import Course, TrainingClass
from datetime import date, timedelta

TEST_DB_URL = "sqlite:///./test_enrollment.db"

engine = build_engine(TEST_DB_URL)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_participant(db, full_name: str, email: str = None) -> Participant:
    user_id = None
    if email:
        user = User(email=email, username=email.split("@")[0], role="participant")
        db.add(user)
        db.flush()
        user_id = user.user_id
    participant = Participant(user_id=user_id, full_name=full_name, company="PT Test")
    db.add(participant)
    db.commit()
    db.refresh(participant)
    return participant


def make_class(db, quota: int = 2, price: int = 500000, reg_open: bool = True, duration_day: int = 3) -> TrainingClass:
    course = Course(course_name="Network Fundamentals", course_type="Networking")
    db.add(course)
    db.flush()
    today = date.today()
    if reg_open:
        start_reg, end_reg = today - timedelta(days=1), today + timedelta(days=10)
    else:
        start_reg, end_reg = today - timedelta(days=20), today - timedelta(days=5)
    training_class = TrainingClass(
        course_id=course.course_id,
        quota=quota,
        price=price,
        start_reg_date=start_reg,
        end_reg_date=end_reg,
        start_date=today + timedelta(days=14),
        end_date=today + timedelta(days=14 + duration_day - 1),
        duration_day=duration_day,
        location="Jakarta",
    )
    db.add(training_class)
    db.commit()
    db.refresh(training_class)
    return training_class


@pytest.fixture
def seed_users(db):
    admin = User(email="admin@train4best.local", username="admin", role="admin")
    instructor_user = User(email="instructor@train4best.local", username="instructor", role="instructor")
    db.add_all([admin, instructor_user])
    db.commit()
    instructor = Instructor(user_id=instructor_user.user_id, full_name="Budi Santoso")
    db.add(instructor)
    db.commit()
    participant = make_participant(db, "Siti Rahma", "participant@train4best.local")
    other = make_participant(db, "Andi Wijaya", "other@train4best.local")
    for row in (admin, instructor_user, instructor):
        db.refresh(row)
    return {
        "admin": admin,
        "instructor_user": instructor_user,
        "instructor": instructor,
        "participant": participant,
        "other": other,
    }


@pytest.fixture
def seed_class(db):
    return make_class(db)


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
