from datetime import date

import httpx
import pytest

from enrollment.config import settings
from enrollment.models.notification import Notification
from enrollment.services import (
    certificate_service,
    notification_service,
    payment_service,
    registration_service,
    verification_service,
)
from enrollment.services.mail_client import MailClient
from enrollment.utils.errors import NotFoundError
from tests.conftest import auth_headers, make_class, make_participant


@pytest.fixture
def pending_payment(db, seed_users, seed_class):
    registration = registration_service.register(db, seed_users["participant"].participant_id, seed_class.class_id)
    return payment_service.record_proof(db, registration.registration_id, 500000, None, "proofs/a.jpg")


def _notifications_for(db, user_id):
    db.expire_all()
    return db.query(Notification).filter(Notification.user_id == user_id).all()


def test_approval_creates_notification(db, seed_users, pending_payment):
    verification_service.verify(db, pending_payment.payment_id, approve=True)

    rows = _notifications_for(db, seed_users["participant"].user_id)
    assert [r.noti_type for r in rows] == ["payment_approved"]
    assert rows[0].email_status == "skipped"
    assert rows[0].is_read is False


def test_rejection_creates_notification(db, seed_users, pending_payment):
    verification_service.verify(db, pending_payment.payment_id, approve=False)
    rows = _notifications_for(db, seed_users["participant"].user_id)
    assert [r.noti_type for r in rows] == ["payment_rejected"]


def test_mail_failure_does_not_fail_verification(db, seed_users, pending_payment, monkeypatch):
    monkeypatch.setattr(settings, "MAIL_ENABLED", True)

    def broken_send(self, to, subject, html):
        raise httpx.ConnectError("relay down")

    monkeypatch.setattr(MailClient, "send", broken_send)

    payment, registration = verification_service.verify(db, pending_payment.payment_id, approve=True)
    assert payment.status == "Paid"
    assert registration.reg_status == "Registered"

    rows = _notifications_for(db, seed_users["participant"].user_id)
    assert rows[0].email_status == "failed"


def test_mail_sent_through_relay(db, seed_users, pending_payment, monkeypatch):
    monkeypatch.setattr(settings, "MAIL_ENABLED", True)
    sent = []
    monkeypatch.setattr(MailClient, "send", lambda self, to, subject, html: sent.append((to, subject)))

    verification_service.verify(db, pending_payment.payment_id, approve=True)

    assert sent == [("participant@train4best.local", "Payment Approved - Network Fundamentals")]
    assert _notifications_for(db, seed_users["participant"].user_id)[0].email_status == "sent"


def test_mail_body_escapes_markup(db, seed_users, seed_class, monkeypatch):
    monkeypatch.setattr(settings, "MAIL_ENABLED", True)
    bodies = []
    monkeypatch.setattr(MailClient, "send", lambda self, to, subject, html: bodies.append(html))

    certificate_service.issue(
        db,
        course_id=seed_class.course_id,
        name="R&D <Advanced> Track",
        issue_date=date(2026, 1, 10),
        expiry_date=date(2027, 1, 10),
        participant_id=seed_users["participant"].participant_id,
    )

    assert len(bodies) == 1
    assert "R&amp;D &lt;Advanced&gt; Track" in bodies[0]
    assert "<Advanced>" not in bodies[0]
    assert bodies[0].startswith("<p>") and bodies[0].endswith("</p>")

    # 인앱 알림에는 원문을 그대로 저장한다.
    row = _notifications_for(db, seed_users["participant"].user_id)[0]
    assert "R&D <Advanced> Track" in row.message


def test_participant_without_account_is_skipped(db, seed_class):
    walk_in = make_participant(db, "Walk In")
    registration = registration_service.register(db, walk_in.participant_id, seed_class.class_id)
    payment = payment_service.record_proof(db, registration.registration_id, 500000, None, "proofs/a.jpg")

    payment, registration = verification_service.verify(db, payment.payment_id, approve=True)
    assert registration.reg_status == "Registered"
    assert db.query(Notification).count() == 0


def test_mark_read_and_read_all(client, db, seed_users, pending_payment):
    verification_service.verify(db, pending_payment.payment_id, approve=True)
    headers = auth_headers(client, "participant@train4best.local")

    listed = client.get("/api/notifications?unread_only=true", headers=headers)
    assert listed.status_code == 200
    noti_id = listed.json()[0]["noti_id"]

    resp = client.patch(f"/api/notifications/{noti_id}/read", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["is_read"] is True

    other = client.patch(f"/api/notifications/{noti_id}/read", headers=auth_headers(client, "other@train4best.local"))
    assert other.status_code == 404

    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"unread": 0}

    verification_service.verify(db, _second_pending_payment(db, seed_users).payment_id, approve=False)
    assert client.get("/api/notifications/unread-count", headers=headers).json() == {"unread": 1}

    assert client.post("/api/notifications/read-all", headers=headers).json() == {"unread": 0}
    assert client.get("/api/notifications?unread_only=true", headers=headers).json() == []
    assert len(client.get("/api/notifications", headers=headers).json()) == 2


def _second_pending_payment(db, seed_users):
    other_class = make_class(db, quota=5)
    registration = registration_service.register(db, seed_users["participant"].participant_id, other_class.class_id)
    return payment_service.record_proof(db, registration.registration_id, 500000, None, "proofs/b.jpg")


def test_mark_read_missing(db, seed_users):
    with pytest.raises(NotFoundError):
        notification_service.mark_read(db, 999, seed_users["participant"].user_id)
