"""Quota Service 도메인 서비스 레이어입니다. 클래스 잔여 좌석을 계산하고 신규 등록을 통제합니다."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from enrollment.models.course import TrainingClass
from enrollment.models.registration import Registration, REG_CANCELLED
from enrollment.utils.errors import NotFoundError

logger = logging.getLogger(__name__)


def get_class(db: Session, class_id: int) -> TrainingClass:
    training_class = db.query(TrainingClass).filter(TrainingClass.class_id == class_id).first()
    if not training_class:
        raise NotFoundError("클래스를 찾을 수 없습니다.")
    return training_class


def count_active_registrations(db: Session, class_id: int) -> int:
    return (
        db.query(Registration)
        .filter(Registration.class_id == class_id, Registration.reg_status != REG_CANCELLED)
        .count()
    )


def remaining_seats(db: Session, class_id: int) -> int:
    training_class = get_class(db, class_id)
    remaining = training_class.quota - count_active_registrations(db, class_id)
    if remaining < 0:
        logger.error("[quota] class %s is overbooked by %s seat(s)", class_id, -remaining)
    return remaining


def is_registration_open(training_class: TrainingClass, now: Optional[datetime] = None) -> bool:
    today = (now or datetime.now()).date()
    return training_class.start_reg_date <= today <= training_class.end_reg_date


def can_register(db: Session, class_id: int, now: Optional[datetime] = None) -> bool:
    training_class = get_class(db, class_id)
    return remaining_seats(db, class_id) > 0 and is_registration_open(training_class, now)


def quota_summary(db: Session, class_id: int, now: Optional[datetime] = None) -> dict:
    training_class = get_class(db, class_id)
    active = count_active_registrations(db, class_id)
    remaining = training_class.quota - active
    window_open = is_registration_open(training_class, now)
    return {
        "class_id": class_id,
        "quota": training_class.quota,
        "active_registrations": active,
        "remaining_seats": remaining,
        "registration_open": window_open,
        "can_register": remaining > 0 and window_open,
    }


def reserve_seat(db: Session, class_id: int) -> bool:
    """Take one seat with a single conditional UPDATE on the class row.

    Runs inside the caller's transaction; concurrent callers serialize on the
    row write, so at most ``quota`` reservations can ever succeed.
    """
    result = db.execute(
        update(TrainingClass)
        .where(TrainingClass.class_id == class_id, TrainingClass.seats_taken < TrainingClass.quota)
        .values(seats_taken=TrainingClass.seats_taken + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def release_seat(db: Session, class_id: int) -> None:
    db.execute(
        update(TrainingClass)
        .where(TrainingClass.class_id == class_id, TrainingClass.seats_taken > 0)
        .values(seats_taken=TrainingClass.seats_taken - 1)
        .execution_options(synchronize_session=False)
    )
