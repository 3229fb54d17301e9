"""정원 계산과 등록 가능 여부 판단을 검증합니다."""

from datetime import datetime, timedelta

import pytest

from enrollment.models.course import TrainingClass
from enrollment.services import quota_service, registration_service
from enrollment.utils.errors import NotFoundError
from tests.conftest import auth_headers, make_class, make_participant


def test_remaining_seats_counts_active_registrations(db):
    training_class = make_class(db, quota=3)
    first = make_participant(db, "P1")
    second = make_participant(db, "P2")

    assert quota_service.remaining_seats(db, training_class.class_id) == 3
    registration_service.register(db, first.participant_id, training_class.class_id)
    registration_service.register(db, second.participant_id, training_class.class_id)
    assert quota_service.remaining_seats(db, training_class.class_id) == 1


def test_can_register_false_when_full(db):
    training_class = make_class(db, quota=1)
    participant = make_participant(db, "P1")
    assert quota_service.can_register(db, training_class.class_id) is True

    registration_service.register(db, participant.participant_id, training_class.class_id)
    assert quota_service.can_register(db, training_class.class_id) is False


def test_can_register_respects_registration_window(db):
    training_class = make_class(db, quota=5)
    after_window = datetime.combine(training_class.end_reg_date, datetime.min.time()) + timedelta(days=1)
    on_last_day = datetime.combine(training_class.end_reg_date, datetime.min.time()) + timedelta(hours=23)

    assert quota_service.can_register(db, training_class.class_id, now=on_last_day) is True
    assert quota_service.can_register(db, training_class.class_id, now=after_window) is False


def test_remaining_seats_missing_class(db):
    with pytest.raises(NotFoundError):
        quota_service.remaining_seats(db, 999)


def test_reserve_seat_stops_at_quota(db):
    training_class = make_class(db, quota=2)
    assert quota_service.reserve_seat(db, training_class.class_id) is True
    assert quota_service.reserve_seat(db, training_class.class_id) is True
    assert quota_service.reserve_seat(db, training_class.class_id) is False
    db.commit()

    db.expire_all()
    assert db.get(TrainingClass, training_class.class_id).seats_taken == 2


def test_quota_endpoint(client, db, seed_users, seed_class):
    headers = auth_headers(client, "participant@train4best.local")
    registration_service.register(db, seed_users["other"].participant_id, seed_class.class_id)

    resp = client.get(f"/api/classes/{seed_class.class_id}/quota", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["quota"] == 2
    assert data["active_registrations"] == 1
    assert data["remaining_seats"] == 1
    assert data["registration_open"] is True
    assert data["can_register"] is True


def test_quota_endpoint_missing_class(client, seed_users):
    headers = auth_headers(client, "participant@train4best.local")
    resp = client.get("/api/classes/404/quota", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"
