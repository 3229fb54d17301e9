"""Registrations 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from enrollment.database import get_db
from enrollment.middleware.auth_middleware import get_current_user, require_roles
from enrollment.models.user import User
from enrollment.schemas.certificate import CertificateOut, RegistrationCertificateCreate
from enrollment.schemas.payment import PaymentOut
from enrollment.schemas.registration import (
    AttendanceUpdate,
    ManualPaymentUpdate,
    RegistrationCreate,
    RegistrationOut,
    ValueReportCreate,
    ValueReportOut,
    ValueReportPage,
    ValueReportUpdate,
)
from enrollment.services import (
    certificate_service,
    payment_service,
    registration_service,
    value_report_service,
)
from enrollment.utils.errors import NotFoundError
from enrollment.utils.permissions import can_register_participant, can_view_registration, participant_id_of

router = APIRouter(prefix="/api/registrations", tags=["registrations"])


def _get_visible_registration(db: Session, registration_id: int, current_user: User):
    registration = registration_service.get_registration(db, registration_id)
    if not can_view_registration(db, registration, current_user):
        raise HTTPException(status_code=403, detail="본인의 등록 정보만 조회할 수 있습니다.")
    return registration


@router.post("", response_model=RegistrationOut, status_code=201)
def register(
    data: RegistrationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "participant")),
):
    participant_id = data.participant_id
    if participant_id is None:
        participant_id = participant_id_of(db, current_user)
        if participant_id is None:
            raise NotFoundError("참가자 프로필이 없습니다.")
    if not can_register_participant(db, participant_id, current_user):
        raise HTTPException(status_code=403, detail="본인만 등록할 수 있습니다.")
    return registration_service.register(
        db,
        participant_id,
        data.class_id,
        payment_method=data.payment_method,
    )


@router.get("/me", response_model=List[RegistrationOut])
def my_registrations(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("participant")),
):
    participant_id = participant_id_of(db, current_user)
    if participant_id is None:
        return []
    return registration_service.list_participant_registrations(db, participant_id)


@router.get("/{registration_id}", response_model=RegistrationOut)
def get_registration(
    registration_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_visible_registration(db, registration_id, current_user)


@router.delete("/{registration_id}")
def cancel_registration(
    registration_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    registration_service.cancel(db, registration_id)
    return {"message": "등록이 취소되었습니다."}


@router.put("/{registration_id}/attendance", response_model=RegistrationOut)
def update_attendance(
    registration_id: int,
    data: AttendanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "instructor")),
):
    return registration_service.update_attendance(db, registration_id, data.present_day)


@router.put("/{registration_id}/payment", response_model=RegistrationOut)
def record_manual_payment(
    registration_id: int,
    data: ManualPaymentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    return payment_service.record_manual_payment(
        db,
        registration_id,
        data.amount,
        method=data.payment_method,
        allow_reversal=data.allow_reversal,
    )


@router.get("/{registration_id}/payments", response_model=List[PaymentOut])
def list_payments(
    registration_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_visible_registration(db, registration_id, current_user)
    return payment_service.list_registration_payments(db, registration_id)


@router.post("/{registration_id}/certificate", response_model=CertificateOut, status_code=201)
def issue_registration_certificate(
    registration_id: int,
    data: RegistrationCertificateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    return certificate_service.issue_for_registration(
        db,
        registration_id,
        issue_date=data.issue_date,
        expiry_date=data.expiry_date,
        pdf_url=data.pdf_url,
        drive_link=data.drive_link,
    )


@router.get("/{registration_id}/values", response_model=ValueReportPage)
def list_values(
    registration_id: int,
    page: int = 1,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_visible_registration(db, registration_id, current_user)
    return value_report_service.list_values(db, registration_id, page)


@router.post("/{registration_id}/values", response_model=ValueReportOut, status_code=201)
def add_value(
    registration_id: int,
    data: ValueReportCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "instructor")),
):
    return value_report_service.add_value(db, registration_id, data.value_type, data.value, data.remark)


@router.put("/{registration_id}/values/{value_id}", response_model=ValueReportOut)
def update_value(
    registration_id: int,
    value_id: int,
    data: ValueReportUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "instructor")),
):
    return value_report_service.update_value(db, registration_id, value_id, data.model_dump(exclude_none=True))


@router.delete("/{registration_id}/values/{value_id}")
def delete_value(
    registration_id: int,
    value_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "instructor")),
):
    value_report_service.delete_value(db, registration_id, value_id)
    return {"message": "삭제되었습니다."}
