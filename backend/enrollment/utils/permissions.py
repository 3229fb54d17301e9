"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from typing import Optional

from sqlalchemy.orm import Session

from enrollment.models.user import User, Participant
from enrollment.models.registration import Registration


ADMIN = "admin"
PARTICIPANT = "participant"
INSTRUCTOR = "instructor"

ALL_ROLES = (ADMIN, PARTICIPANT, INSTRUCTOR)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_participant(user: User) -> bool:
    return user.role == PARTICIPANT


def participant_id_of(db: Session, user: User) -> Optional[int]:
    row = db.query(Participant.participant_id).filter(Participant.user_id == user.user_id).first()
    return int(row[0]) if row else None


def owns_registration(db: Session, registration: Registration, user: User) -> bool:
    return participant_id_of(db, user) == registration.participant_id


def can_view_registration(db: Session, registration: Registration, user: User) -> bool:
    if is_admin(user):
        return True
    return is_participant(user) and owns_registration(db, registration, user)


def can_register_participant(db: Session, participant_id: int, user: User) -> bool:
    if is_admin(user):
        return True
    return is_participant(user) and participant_id_of(db, user) == participant_id
