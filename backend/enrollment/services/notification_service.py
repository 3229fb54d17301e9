"""Notification Service 도메인 서비스 레이어입니다. 결제/수료증 알림을 인앱 기록과 메일로 전달합니다.

메일 전송 실패는 로그와 ``email_status``로만 남기고 호출한 작업을 실패시키지 않습니다.
"""

import html
import logging
from typing import List, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from enrollment.config import settings
from enrollment.models.certificate import Certificate
from enrollment.models.notification import Notification, EMAIL_FAILED, EMAIL_SENT, EMAIL_SKIPPED
from enrollment.models.payment import Payment, PAYMENT_PAID
from enrollment.models.registration import Registration
from enrollment.models.user import User
from enrollment.services.mail_client import MailClient
from enrollment.utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def get_notifications(db: Session, user_id: int, unread_only: bool = False, limit: int = 50) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)
    return q.order_by(Notification.created_at.desc(), Notification.noti_id.desc()).limit(limit).all()


def count_unread(db: Session, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)
        .count()
    )


def mark_read(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = db.query(Notification).filter(
        Notification.noti_id == noti_id,
        Notification.user_id == user_id,
    ).first()
    if not noti:
        raise NotFoundError("알림을 찾을 수 없습니다.")
    noti.is_read = True
    db.commit()
    db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int):
    db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,
    ).update({"is_read": True})
    db.commit()


def _send_email(to: Optional[str], subject: str, body: str) -> str:
    if not settings.MAIL_ENABLED or not to:
        return EMAIL_SKIPPED
    try:
        MailClient().send(to, subject, body)
    except httpx.HTTPError as exc:
        logger.warning("[notification] mail relay failed for %s: %s", to, exc)
        return EMAIL_FAILED
    return EMAIL_SENT


def dispatch(
    db: Session,
    user: Optional[User],
    noti_type: str,
    title: str,
    message: str,
    link_url: Optional[str] = None,
) -> Optional[Notification]:
    if user is None:
        logger.info("[notification] %s skipped: no linked user account", noti_type)
        return None

    email_status = _send_email(user.email, title, f"<p>{html.escape(message)}</p>")
    noti = Notification(
        user_id=user.user_id,
        noti_type=noti_type,
        title=title,
        message=message,
        link_url=link_url,
        email_status=email_status,
    )
    try:
        db.add(noti)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[notification] %s for user %s not recorded: %s", noti_type, user.user_id, exc)
        return None
    db.refresh(noti)
    return noti


def send_payment_notification(db: Session, payment: Payment, registration: Registration) -> Optional[Notification]:
    participant = registration.participant
    course_name = registration.training_class.course.course_name
    if payment.status == PAYMENT_PAID:
        noti_type = "payment_approved"
        title = f"Payment Approved - {course_name}"
        message = f"{course_name} 수강 결제가 승인되어 등록이 확정되었습니다."
    else:
        noti_type = "payment_rejected"
        title = f"Payment Rejected - {course_name}"
        message = f"{course_name} 수강 결제가 반려되었습니다. 결제 증빙을 확인해 주세요."
    return dispatch(
        db,
        participant.user if participant else None,
        noti_type,
        title,
        message,
        link_url=f"/participant/payment/{registration.registration_id}",
    )


def send_certificate_email(db: Session, certificate: Certificate) -> Optional[Notification]:
    holder = certificate.participant or certificate.instructor
    message = (
        f"{certificate.name} 수료증(번호 {certificate.certificate_number})이 발급되었습니다. "
        f"유효기간: {certificate.expiry_date.isoformat()}"
    )
    return dispatch(
        db,
        holder.user if holder else None,
        "certificate_issued",
        f"Certificate Issued - {certificate.name}",
        message,
        link_url=certificate.drive_link or certificate.pdf_url or f"/certificate/{certificate.certificate_id}",
    )
