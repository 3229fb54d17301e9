"""Payment Service 도메인 서비스 레이어입니다. 결제 증빙/금액을 기록하고 등록의 결제 상태를 도출합니다."""

import logging
import secrets
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from enrollment.database import atomic
from enrollment.models.payment import (
    Payment,
    PAYMENT_PAID,
    PAYMENT_PARTIAL,
    PAYMENT_PENDING,
    PAYMENT_UNPAID,
)
from enrollment.models.registration import Registration, REG_REGISTERED, REG_REJECTED
from enrollment.services import registration_service
from enrollment.utils.errors import InvalidStateError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

DEFAULT_PROOF_METHOD = "Bank Transfer"

# Registration.payment_status의 진행 순서. 이보다 낮은 상태로의 이동은 되돌리기로 본다.
PAYMENT_STATUS_ORDER = {
    PAYMENT_UNPAID: 0,
    PAYMENT_PARTIAL: 1,
    PAYMENT_PENDING: 2,
    PAYMENT_PAID: 3,
}


def derive_status(paid_amount: int, class_price: int) -> str:
    """Map an admin-entered paid amount onto Unpaid / Partial / Paid."""
    if paid_amount < 0:
        raise ValidationFailedError("결제 금액은 0 이상이어야 합니다.")
    if paid_amount >= class_price:
        return PAYMENT_PAID
    if paid_amount > 0:
        return PAYMENT_PARTIAL
    return PAYMENT_UNPAID


def new_reference_number(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    return f"PAY-{stamp}-{secrets.token_hex(3).upper()}"


def get_payment(db: Session, payment_id: int) -> Payment:
    payment = db.query(Payment).filter(Payment.payment_id == payment_id).first()
    if not payment:
        raise NotFoundError("결제 정보를 찾을 수 없습니다.")
    return payment


def latest_payment(db: Session, registration_id: int) -> Optional[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.registration_id == registration_id)
        .order_by(Payment.payment_id.desc())
        .first()
    )


def list_registration_payments(db: Session, registration_id: int) -> List[Payment]:
    registration_service.get_registration(db, registration_id)
    return (
        db.query(Payment)
        .filter(Payment.registration_id == registration_id)
        .order_by(Payment.payment_id.desc())
        .all()
    )


def list_pending_payments(db: Session) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.status == PAYMENT_PENDING)
        .order_by(Payment.payment_date.asc(), Payment.payment_id.asc())
        .all()
    )


def record_proof(
    db: Session,
    registration_id: int,
    amount: int,
    method: Optional[str],
    proof_ref: str,
    now: Optional[datetime] = None,
) -> Payment:
    if amount is None or amount <= 0:
        raise ValidationFailedError("결제 금액은 0보다 커야 합니다.")
    if not (proof_ref or "").strip():
        raise ValidationFailedError("결제 증빙 파일 정보가 필요합니다.")

    registration = registration_service.get_registration(db, registration_id)
    if registration.payment_status == PAYMENT_PAID or registration.reg_status in (REG_REGISTERED, REG_REJECTED):
        raise InvalidStateError("이미 결제 검증이 완료된 등록입니다.")

    paid_at = now or datetime.now()
    payment = latest_payment(db, registration_id)
    with atomic(db):
        if payment is None:
            payment = Payment(
                registration_id=registration_id,
                reference_number=new_reference_number(paid_at),
            )
            db.add(payment)
        payment.amount = amount
        payment.payment_method = method or payment.payment_method or DEFAULT_PROOF_METHOD
        payment.proof_url = proof_ref.strip()
        payment.payment_date = paid_at
        payment.status = PAYMENT_PENDING
        # reg_status는 관리자 검증 전까지 그대로 둔다.
        registration.payment_status = PAYMENT_PENDING
        db.flush()

    db.refresh(payment)
    logger.info(
        "[payment] proof recorded payment=%s registration=%s amount=%s",
        payment.payment_id,
        registration_id,
        amount,
    )
    return payment


def record_manual_payment(
    db: Session,
    registration_id: int,
    amount: int,
    method: Optional[str] = None,
    allow_reversal: bool = False,
    now: Optional[datetime] = None,
) -> Registration:
    registration = registration_service.get_registration(db, registration_id)
    new_status = derive_status(amount, registration.training_class.price)

    if registration.reg_status == REG_REJECTED:
        raise InvalidStateError("반려된 등록은 수기 결제로 변경할 수 없습니다.")
    payment = latest_payment(db, registration_id)
    if payment is not None and payment.status == PAYMENT_PENDING:
        raise InvalidStateError("검증 대기 중인 결제 증빙이 있습니다. 먼저 승인 또는 반려해 주세요.")

    current_rank = PAYMENT_STATUS_ORDER.get(registration.payment_status, 0)
    if PAYMENT_STATUS_ORDER[new_status] < current_rank and not allow_reversal:
        raise InvalidStateError("결제 상태를 낮추려면 allow_reversal을 지정해야 합니다.")

    with atomic(db):
        if payment is None and amount > 0:
            payment = Payment(
                registration_id=registration_id,
                reference_number=new_reference_number(now),
                payment_date=now or datetime.now(),
                payment_method=method or "Unknown",
            )
            db.add(payment)
        if payment is not None:
            payment.amount = amount
            payment.status = new_status
            if method:
                payment.payment_method = method
        registration.payment_amount = amount
        registration.payment_status = new_status
        if method:
            registration.payment_method = method

    db.refresh(registration)
    logger.info(
        "[payment] manual payment registration=%s amount=%s status=%s reversal=%s",
        registration_id,
        amount,
        new_status,
        allow_reversal,
    )
    return registration
