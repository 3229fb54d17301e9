"""등록 생성 규칙(중복/정원/기간)과 동시 등록 시 정원 보장을 검증합니다."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from enrollment.models.course import TrainingClass
from enrollment.models.registration import Registration
from enrollment.services import registration_service
from enrollment.utils.errors import CapacityError, ConflictError, NotFoundError, ValidationFailedError
from tests.conftest import TestingSession, auth_headers, make_class, make_participant


def test_register_creates_pending_unpaid(db, seed_users, seed_class):
    registration = registration_service.register(db, seed_users["participant"].participant_id, seed_class.class_id)
    assert registration.reg_status == "Pending"
    assert registration.payment_status == "Unpaid"
    assert registration.payment_amount == 0
    assert registration.present_day == 0
    assert registration.reg_date is not None


def test_register_missing_class_or_participant(db, seed_users, seed_class):
    with pytest.raises(NotFoundError):
        registration_service.register(db, seed_users["participant"].participant_id, 999)
    with pytest.raises(NotFoundError):
        registration_service.register(db, 999, seed_class.class_id)


def test_register_duplicate_is_conflict(db, seed_users, seed_class):
    participant_id = seed_users["participant"].participant_id
    registration_service.register(db, participant_id, seed_class.class_id)
    with pytest.raises(ConflictError):
        registration_service.register(db, participant_id, seed_class.class_id)


def test_register_closed_window_is_capacity(db, seed_users):
    closed = make_class(db, quota=5, reg_open=False)
    with pytest.raises(CapacityError):
        registration_service.register(db, seed_users["participant"].participant_id, closed.class_id)


def test_register_full_class_is_capacity(db):
    training_class = make_class(db, quota=1)
    first = make_participant(db, "P1")
    second = make_participant(db, "P2")
    registration_service.register(db, first.participant_id, training_class.class_id)

    with pytest.raises(CapacityError):
        registration_service.register(db, second.participant_id, training_class.class_id)

    db.expire_all()
    assert db.query(Registration).filter(Registration.class_id == training_class.class_id).count() == 1
    assert db.get(TrainingClass, training_class.class_id).seats_taken == 1


def _register_concurrently(class_id: int, participant_ids: list) -> list:
    barrier = threading.Barrier(len(participant_ids))

    def attempt(participant_id: int) -> str:
        session = TestingSession()
        try:
            barrier.wait()
            registration_service.register(session, participant_id, class_id)
            return "ok"
        except CapacityError:
            return "capacity"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=len(participant_ids)) as pool:
        return list(pool.map(attempt, participant_ids))


def test_concurrent_registrations_never_exceed_quota(db):
    training_class = make_class(db, quota=3)
    participant_ids = [make_participant(db, f"P{i}").participant_id for i in range(8)]

    results = _register_concurrently(training_class.class_id, participant_ids)

    assert results.count("ok") == 3
    assert results.count("capacity") == 5
    db.expire_all()
    assert db.query(Registration).filter(Registration.class_id == training_class.class_id).count() == 3
    assert db.get(TrainingClass, training_class.class_id).seats_taken == 3


def test_last_seat_goes_to_exactly_one_of_two(db):
    training_class = make_class(db, quota=1)
    participant_ids = [make_participant(db, "P1").participant_id, make_participant(db, "P2").participant_id]

    results = _register_concurrently(training_class.class_id, participant_ids)

    assert sorted(results) == ["capacity", "ok"]


def test_update_attendance_clamps_to_duration(db, seed_users):
    training_class = make_class(db, duration_day=3)
    registration = registration_service.register(db, seed_users["participant"].participant_id, training_class.class_id)

    updated = registration_service.update_attendance(db, registration.registration_id, 2)
    assert updated.present_day == 2
    updated = registration_service.update_attendance(db, registration.registration_id, 10)
    assert updated.present_day == 3


def test_update_attendance_rejects_negative(db, seed_users, seed_class):
    registration = registration_service.register(db, seed_users["participant"].participant_id, seed_class.class_id)
    with pytest.raises(ValidationFailedError):
        registration_service.update_attendance(db, registration.registration_id, -1)


def test_participant_registers_self_via_api(client, seed_users, seed_class):
    headers = auth_headers(client, "participant@train4best.local")
    resp = client.post("/api/registrations", json={"class_id": seed_class.class_id}, headers=headers)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["participant_id"] == seed_users["participant"].participant_id
    assert data["reg_status"] == "Pending"
    assert data["payment_status"] == "Unpaid"

    dup = client.post("/api/registrations", json={"class_id": seed_class.class_id}, headers=headers)
    assert dup.status_code == 409
    assert dup.json()["code"] == "conflict"

    mine = client.get("/api/registrations/me", headers=headers)
    assert mine.status_code == 200
    assert [r["registration_id"] for r in mine.json()] == [data["registration_id"]]


def test_participant_cannot_register_someone_else(client, seed_users, seed_class):
    headers = auth_headers(client, "participant@train4best.local")
    resp = client.post(
        "/api/registrations",
        json={"class_id": seed_class.class_id, "participant_id": seed_users["other"].participant_id},
        headers=headers,
    )
    assert resp.status_code == 403


def test_full_class_returns_capacity_code(client, db, seed_users):
    training_class = make_class(db, quota=1)
    registration_service.register(db, seed_users["other"].participant_id, training_class.class_id)

    headers = auth_headers(client, "participant@train4best.local")
    resp = client.post("/api/registrations", json={"class_id": training_class.class_id}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["code"] == "capacity"


def test_other_participant_cannot_view_registration(client, db, seed_users, seed_class):
    registration = registration_service.register(db, seed_users["participant"].participant_id, seed_class.class_id)
    headers = auth_headers(client, "other@train4best.local")
    resp = client.get(f"/api/registrations/{registration.registration_id}", headers=headers)
    assert resp.status_code == 403


def test_attendance_endpoint_for_instructor(client, db, seed_users):
    training_class = make_class(db, duration_day=5)
    registration = registration_service.register(db, seed_users["participant"].participant_id, training_class.class_id)
    headers = auth_headers(client, "instructor@train4best.local")

    resp = client.put(
        f"/api/registrations/{registration.registration_id}/attendance",
        json={"present_day": 4},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["present_day"] == 4

    bad = client.put(
        f"/api/registrations/{registration.registration_id}/attendance",
        json={"present_day": -2},
        headers=headers,
    )
    assert bad.status_code == 400
    assert bad.json()["code"] == "validation"
