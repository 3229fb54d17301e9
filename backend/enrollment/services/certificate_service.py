"""Certificate Service 도메인 서비스 레이어입니다. 수료증 번호 생성, 발급, 만료 처리를 담당합니다."""

import logging
import secrets
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Union

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from enrollment.config import settings
from enrollment.models.certificate import Certificate, CERT_EXPIRED, CERT_VALID
from enrollment.models.course import Course
from enrollment.models.registration import REG_REGISTERED
from enrollment.models.user import Instructor, Participant
from enrollment.services import notification_service, registration_service
from enrollment.utils.errors import (
    ConflictError,
    ExhaustedError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def _random_number() -> str:
    # 10자리 숫자 (1000000000 ~ 9999999999)
    return str(1_000_000_000 + secrets.randbelow(9_000_000_000))


def number_exists(db: Session, certificate_number: str) -> bool:
    return (
        db.query(Certificate.certificate_id)
        .filter(Certificate.certificate_number == certificate_number)
        .first()
        is not None
    )


def generate_number(db: Session) -> str:
    attempts = max(1, settings.CERTIFICATE_NUMBER_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        candidate = _random_number()
        if not number_exists(db, candidate):
            return candidate
        logger.warning("[certificate] number collision %s (attempt %s/%s)", candidate, attempt, attempts)
    raise ExhaustedError()


def get_certificate(db: Session, certificate_id: int) -> Certificate:
    certificate = db.query(Certificate).filter(Certificate.certificate_id == certificate_id).first()
    if not certificate:
        raise NotFoundError("수료증을 찾을 수 없습니다.")
    return certificate


def list_certificates(
    db: Session,
    status: Optional[str] = None,
    participant_id: Optional[int] = None,
    instructor_id: Optional[int] = None,
) -> List[Certificate]:
    q = db.query(Certificate)
    if status:
        q = q.filter(Certificate.status == status)
    if participant_id is not None:
        q = q.filter(Certificate.participant_id == participant_id)
    if instructor_id is not None:
        q = q.filter(Certificate.instructor_id == instructor_id)
    return q.order_by(Certificate.issue_date.desc(), Certificate.certificate_id.desc()).all()


def _ensure_holder(db: Session, participant_id: Optional[int], instructor_id: Optional[int]) -> None:
    if participant_id is None and instructor_id is None:
        raise ValidationFailedError("참가자 또는 강사 중 하나는 지정해야 합니다.")
    if participant_id is not None:
        exists = db.query(Participant.participant_id).filter(Participant.participant_id == participant_id).first()
        if not exists:
            raise NotFoundError("참가자를 찾을 수 없습니다.")
    if instructor_id is not None:
        exists = db.query(Instructor.instructor_id).filter(Instructor.instructor_id == instructor_id).first()
        if not exists:
            raise NotFoundError("강사를 찾을 수 없습니다.")


def issue(
    db: Session,
    course_id: int,
    name: str,
    issue_date: date,
    expiry_date: date,
    participant_id: Optional[int] = None,
    instructor_id: Optional[int] = None,
    registration_id: Optional[int] = None,
    pdf_url: Optional[str] = None,
    drive_link: Optional[str] = None,
    certificate_number: Optional[str] = None,
) -> Certificate:
    if not (name or "").strip():
        raise ValidationFailedError("수료증 이름이 필요합니다.")
    if expiry_date < issue_date:
        raise ValidationFailedError("만료일은 발급일 이후여야 합니다.")
    if not db.query(Course.course_id).filter(Course.course_id == course_id).first():
        raise NotFoundError("과정을 찾을 수 없습니다.")
    _ensure_holder(db, participant_id, instructor_id)
    if registration_id is not None:
        registration_service.get_registration(db, registration_id)
    if certificate_number and number_exists(db, certificate_number):
        raise ConflictError("이미 사용 중인 수료증 번호입니다.")

    attempts = max(1, settings.CERTIFICATE_NUMBER_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        certificate = Certificate(
            certificate_number=certificate_number or generate_number(db),
            name=name.strip(),
            issue_date=issue_date,
            expiry_date=expiry_date,
            status=CERT_VALID,
            participant_id=participant_id,
            instructor_id=instructor_id,
            course_id=course_id,
            registration_id=registration_id,
            pdf_url=pdf_url,
            drive_link=drive_link,
        )
        db.add(certificate)
        try:
            db.commit()
        except IntegrityError:
            # 확인과 INSERT 사이에 같은 번호가 선점된 경우
            db.rollback()
            if certificate_number:
                raise ConflictError("이미 사용 중인 수료증 번호입니다.")
            logger.warning("[certificate] insert collided (attempt %s/%s), regenerating", attempt, attempts)
            continue

        db.refresh(certificate)
        logger.info(
            "[certificate] issued %s course=%s participant=%s instructor=%s",
            certificate.certificate_number,
            course_id,
            participant_id,
            instructor_id,
        )
        notification_service.send_certificate_email(db, certificate)
        return certificate

    raise ExhaustedError()


def issue_for_registration(
    db: Session,
    registration_id: int,
    issue_date: Optional[date] = None,
    expiry_date: Optional[date] = None,
    pdf_url: Optional[str] = None,
    drive_link: Optional[str] = None,
) -> Certificate:
    registration = registration_service.get_registration(db, registration_id)
    if registration.reg_status != REG_REGISTERED:
        raise InvalidStateError("결제 검증이 완료된 등록에만 수료증을 발급할 수 있습니다.")

    existing = (
        db.query(Certificate)
        .filter(Certificate.registration_id == registration_id)
        .order_by(Certificate.certificate_id.desc())
        .first()
    )
    if existing:
        if issue_date:
            existing.issue_date = issue_date
        if expiry_date:
            existing.expiry_date = expiry_date
        if existing.expiry_date < existing.issue_date:
            db.rollback()
            raise ValidationFailedError("만료일은 발급일 이후여야 합니다.")
        existing.pdf_url = pdf_url or existing.pdf_url
        existing.drive_link = drive_link or existing.drive_link
        db.commit()
        db.refresh(existing)
        return existing

    course = registration.training_class.course
    start = issue_date or date.today()
    return issue(
        db,
        course_id=course.course_id,
        name=f"{course.course_name} Certificate",
        issue_date=start,
        expiry_date=expiry_date or start + timedelta(days=settings.CERTIFICATE_VALIDITY_DAYS),
        participant_id=registration.participant_id,
        registration_id=registration_id,
        pdf_url=pdf_url,
        drive_link=drive_link,
    )


def sweep_expirations(db: Session, now: Optional[Union[date, datetime]] = None) -> int:
    """Flip every Valid certificate whose expiry moment has passed to Expired.

    An expiry date means midnight at the start of that day, so a sweep at any
    time after midnight expires certificates dated today. A plain ``date``
    argument is treated as that day's midnight.
    """
    if now is None:
        now = datetime.now()
    if isinstance(now, datetime):
        today = now.date()
        past_midnight = now.time() != time.min
    else:
        today = now
        past_midnight = False

    if past_midnight:
        expired = Certificate.expiry_date <= today
    else:
        expired = Certificate.expiry_date < today

    result = db.execute(
        update(Certificate)
        .where(Certificate.status == CERT_VALID, expired)
        .values(status=CERT_EXPIRED)
        .execution_options(synchronize_session=False)
    )
    updated = result.rowcount or 0
    db.commit()
    logger.info("[certificate] expiry sweep as of %s updated %s certificate(s)", now, updated)
    return updated
