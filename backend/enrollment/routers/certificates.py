"""Certificates 기능 API 라우터입니다. 수료증 발급/조회와 만료 일괄 처리를 제공합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from enrollment.database import get_db
from enrollment.middleware.auth_middleware import get_current_user, require_admin_or_cron, require_roles
from enrollment.models.user import User
from enrollment.schemas.certificate import CertificateCreate, CertificateOut, SweepResultOut
from enrollment.services import certificate_service
from enrollment.utils.permissions import is_admin, participant_id_of

router = APIRouter(prefix="/api/certificates", tags=["certificates"])


@router.get("", response_model=List[CertificateOut])
def list_certificates(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if is_admin(current_user):
        return certificate_service.list_certificates(db, status=status)
    participant_id = participant_id_of(db, current_user)
    if participant_id is None:
        return []
    return certificate_service.list_certificates(db, status=status, participant_id=participant_id)


@router.post("", response_model=CertificateOut, status_code=201)
def issue_certificate(
    data: CertificateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    return certificate_service.issue(db, **data.model_dump())


@router.post("/sweep-expired", response_model=SweepResultOut)
def sweep_expired(
    db: Session = Depends(get_db),
    _caller: Optional[User] = Depends(require_admin_or_cron),
):
    return {"updated": certificate_service.sweep_expirations(db)}


@router.get("/{certificate_id}", response_model=CertificateOut)
def get_certificate(
    certificate_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    certificate = certificate_service.get_certificate(db, certificate_id)
    if not is_admin(current_user) and certificate.participant_id != participant_id_of(db, current_user):
        raise HTTPException(status_code=403, detail="본인의 수료증만 조회할 수 있습니다.")
    return certificate
