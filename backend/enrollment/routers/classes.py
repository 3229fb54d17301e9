"""Classes 기능 API 라우터입니다. 클래스 잔여 좌석 조회와 참가자 목록을 제공합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from enrollment.database import get_db
from enrollment.middleware.auth_middleware import get_current_user, require_roles
from enrollment.models.user import User
from enrollment.schemas.registration import QuotaOut, RegistrationOut
from enrollment.services import quota_service, registration_service

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("/{class_id}/quota", response_model=QuotaOut)
def get_quota(class_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return quota_service.quota_summary(db, class_id)


@router.get("/{class_id}/registrations", response_model=List[RegistrationOut])
def list_registrations(
    class_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "instructor")),
):
    return registration_service.list_class_registrations(db, class_id)
