"""Payment Verification Service 도메인 서비스 레이어입니다.

관리자의 승인/반려는 결제 행과 등록 행을 하나의 트랜잭션에서 함께 전이시킵니다.
결제 전이는 ``status = 'Pending'`` 조건부 UPDATE로 수행하므로, 이미 처리된 결제를 다시
검증하면 (순차든 동시든) 두 번째 호출은 InvalidState로 끝납니다. 등록 행도 ``reg_status = 'Pending'``
조건으로만 전이되며, 등록당 최신 결제가 아닌 행은 검증하지 않습니다.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session

from enrollment.database import atomic
from enrollment.models.payment import Payment, PAYMENT_PAID, PAYMENT_PENDING, PAYMENT_REJECTED
from enrollment.models.registration import Registration, REG_PENDING, REG_REGISTERED, REG_REJECTED
from enrollment.services import notification_service, payment_service
from enrollment.utils.errors import InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)


def verify(
    db: Session,
    payment_id: int,
    approve: bool,
    verified_by: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Tuple[Payment, Registration]:
    payment = payment_service.get_payment(db, payment_id)
    if payment.status != PAYMENT_PENDING:
        raise InvalidStateError(f"검증 대기 중인 결제가 아닙니다. (현재 상태: {payment.status})")

    registration_id = payment.registration_id
    registration = db.query(Registration).filter(Registration.registration_id == registration_id).first()
    if not registration:
        raise NotFoundError("결제에 연결된 등록 정보를 찾을 수 없습니다.")
    # 등록당 최신 결제 행만 유효하다.
    latest = payment_service.latest_payment(db, registration_id)
    if latest.payment_id != payment_id:
        raise InvalidStateError("최신 결제 증빙이 아닙니다. 가장 최근 결제를 검증해 주세요.")

    payment_target = PAYMENT_PAID if approve else PAYMENT_REJECTED
    registration_values = {
        "reg_status": REG_REGISTERED if approve else REG_REJECTED,
        "payment_status": payment_target,
    }
    if approve:
        registration_values["payment_amount"] = payment.amount

    with atomic(db):
        result = db.execute(
            update(Payment)
            .where(Payment.payment_id == payment_id, Payment.status == PAYMENT_PENDING)
            .values(status=payment_target, verified_by=verified_by, verified_at=now or datetime.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidStateError("다른 요청에서 이미 검증된 결제입니다.")

        result = db.execute(
            update(Registration)
            .where(Registration.registration_id == registration_id, Registration.reg_status == REG_PENDING)
            .values(**registration_values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidStateError("검증 대기 중인 등록이 아닙니다.")

    db.refresh(payment)
    db.refresh(registration)
    logger.info(
        "[payment] verification payment=%s registration=%s result=%s by=%s",
        payment_id,
        registration_id,
        payment_target,
        verified_by,
    )

    notification_service.send_payment_notification(db, payment, registration)
    return payment, registration
