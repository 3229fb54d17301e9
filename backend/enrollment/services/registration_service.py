"""Registration Service 도메인 서비스 레이어입니다. 참가자 등록 생성/취소와 출석일 갱신을 담당합니다."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from enrollment.database import atomic
from enrollment.models.certificate import Certificate
from enrollment.models.payment import Payment, PAYMENT_UNPAID
from enrollment.models.registration import Registration, ValueReport, REG_PENDING, REG_CANCELLED
from enrollment.models.user import Participant
from enrollment.services import quota_service
from enrollment.utils.errors import CapacityError, ConflictError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)


def get_registration(db: Session, registration_id: int) -> Registration:
    registration = db.query(Registration).filter(Registration.registration_id == registration_id).first()
    if not registration:
        raise NotFoundError("등록 정보를 찾을 수 없습니다.")
    return registration


def get_participant(db: Session, participant_id: int) -> Participant:
    participant = db.query(Participant).filter(Participant.participant_id == participant_id).first()
    if not participant:
        raise NotFoundError("참가자를 찾을 수 없습니다.")
    return participant


def find_active_registration(db: Session, participant_id: int, class_id: int) -> Optional[Registration]:
    return (
        db.query(Registration)
        .filter(
            Registration.class_id == class_id,
            Registration.participant_id == participant_id,
            Registration.reg_status != REG_CANCELLED,
        )
        .first()
    )


def register(
    db: Session,
    participant_id: int,
    class_id: int,
    now: Optional[datetime] = None,
    payment_method: Optional[str] = None,
) -> Registration:
    training_class = quota_service.get_class(db, class_id)
    get_participant(db, participant_id)

    if find_active_registration(db, participant_id, class_id):
        raise ConflictError("이미 해당 클래스에 등록된 참가자입니다.")
    if not quota_service.is_registration_open(training_class, now):
        raise CapacityError("등록 기간이 아닙니다.")

    registration = Registration(
        class_id=class_id,
        participant_id=participant_id,
        reg_date=now or datetime.now(),
        reg_status=REG_PENDING,
        payment_status=PAYMENT_UNPAID,
        payment_amount=0,
        payment_method=payment_method,
        present_day=0,
    )
    try:
        with atomic(db):
            # 좌석 확보와 등록 INSERT는 같은 트랜잭션에서 처리한다.
            if not quota_service.reserve_seat(db, class_id):
                raise CapacityError("정원이 마감되었습니다.")
            db.add(registration)
            db.flush()
    except IntegrityError:
        logger.info("[registration] duplicate registration rejected participant=%s class=%s", participant_id, class_id)
        raise ConflictError("이미 해당 클래스에 등록된 참가자입니다.")

    db.refresh(registration)
    logger.info(
        "[registration] registered participant=%s class=%s registration=%s",
        participant_id,
        class_id,
        registration.registration_id,
    )
    return registration


def _purge_payments(db: Session, registration_id: int) -> int:
    return (
        db.query(Payment)
        .filter(Payment.registration_id == registration_id)
        .delete(synchronize_session=False)
    )


def _purge_certificates(db: Session, registration_id: int) -> int:
    return (
        db.query(Certificate)
        .filter(Certificate.registration_id == registration_id)
        .delete(synchronize_session=False)
    )


def _purge_value_reports(db: Session, registration_id: int) -> int:
    return (
        db.query(ValueReport)
        .filter(ValueReport.registration_id == registration_id)
        .delete(synchronize_session=False)
    )


def cancel(db: Session, registration_id: int) -> None:
    registration = get_registration(db, registration_id)
    class_id = registration.class_id

    with atomic(db):
        payments = _purge_payments(db, registration_id)
        certificates = _purge_certificates(db, registration_id)
        values = _purge_value_reports(db, registration_id)
        db.query(Registration).filter(
            Registration.registration_id == registration_id
        ).delete(synchronize_session=False)
        quota_service.release_seat(db, class_id)

    db.expunge(registration)
    logger.info(
        "[registration] cancelled registration=%s (payments=%s certificates=%s values=%s)",
        registration_id,
        payments,
        certificates,
        values,
    )


def update_attendance(db: Session, registration_id: int, present_day: int) -> Registration:
    if present_day < 0:
        raise ValidationFailedError("출석일은 0 이상이어야 합니다.")

    registration = get_registration(db, registration_id)
    duration = registration.training_class.duration_day
    if duration is not None and present_day > duration:
        logger.warning(
            "[registration] present_day %s exceeds class duration %s, clamped (registration=%s)",
            present_day,
            duration,
            registration_id,
        )
        present_day = duration

    registration.present_day = present_day
    db.commit()
    db.refresh(registration)
    return registration


def list_class_registrations(db: Session, class_id: int) -> List[Registration]:
    quota_service.get_class(db, class_id)
    return (
        db.query(Registration)
        .filter(Registration.class_id == class_id)
        .order_by(Registration.reg_date.asc(), Registration.registration_id.asc())
        .all()
    )


def list_participant_registrations(db: Session, participant_id: int) -> List[Registration]:
    return (
        db.query(Registration)
        .filter(Registration.participant_id == participant_id)
        .order_by(Registration.reg_date.desc())
        .all()
    )
