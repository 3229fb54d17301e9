"""Payments 기능 API 라우터입니다. 결제 증빙 제출과 관리자 결제 검증을 서비스 레이어로 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from enrollment.database import get_db
from enrollment.middleware.auth_middleware import get_current_user, require_roles
from enrollment.models.user import User
from enrollment.schemas.payment import (
    PaymentOut,
    PaymentProofCreate,
    PaymentVerificationOut,
    PaymentVerifyRequest,
)
from enrollment.services import payment_service, registration_service, verification_service
from enrollment.utils.permissions import can_view_registration

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/proof", response_model=PaymentOut, status_code=201)
def upload_payment_proof(
    data: PaymentProofCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin", "participant")),
):
    registration = registration_service.get_registration(db, data.registration_id)
    if not can_view_registration(db, registration, current_user):
        raise HTTPException(status_code=403, detail="본인의 등록에만 결제 증빙을 제출할 수 있습니다.")
    return payment_service.record_proof(
        db,
        data.registration_id,
        data.amount,
        data.payment_method,
        data.proof_url,
    )


@router.get("/pending", response_model=List[PaymentOut])
def list_pending(db: Session = Depends(get_db), current_user: User = Depends(require_roles("admin"))):
    return payment_service.list_pending_payments(db)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(payment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    payment = payment_service.get_payment(db, payment_id)
    if not can_view_registration(db, payment.registration, current_user):
        raise HTTPException(status_code=403, detail="본인의 결제 정보만 조회할 수 있습니다.")
    return payment


@router.post("/{payment_id}/verify", response_model=PaymentVerificationOut)
def verify_payment(
    payment_id: int,
    data: PaymentVerifyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    payment, registration = verification_service.verify(
        db,
        payment_id,
        data.approve,
        verified_by=current_user.user_id,
    )
    return {"payment": payment, "registration": registration}
