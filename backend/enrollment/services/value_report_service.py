"""Value Report Service 도메인 서비스 레이어입니다. 등록별 평가 점수를 추가/수정/삭제합니다."""

from typing import Optional

from sqlalchemy.orm import Session

from enrollment.models.registration import ValueReport
from enrollment.services import registration_service
from enrollment.utils.errors import NotFoundError, ValidationFailedError

PAGE_SIZE = 10


def _get_value(db: Session, registration_id: int, value_id: int) -> ValueReport:
    row = db.query(ValueReport).filter(
        ValueReport.value_id == value_id,
        ValueReport.registration_id == registration_id,
    ).first()
    if not row:
        raise NotFoundError("평가 항목을 찾을 수 없습니다.")
    return row


def list_values(db: Session, registration_id: int, page: int = 1) -> dict:
    registration_service.get_registration(db, registration_id)
    page = max(1, page)
    q = db.query(ValueReport).filter(ValueReport.registration_id == registration_id)
    total = q.count()
    rows = (
        q.order_by(ValueReport.value_id.desc())
        .offset((page - 1) * PAGE_SIZE)
        .limit(PAGE_SIZE)
        .all()
    )
    return {
        "values": rows,
        "current_page": page,
        "total_pages": (total + PAGE_SIZE - 1) // PAGE_SIZE,
        "total_values": total,
    }


def add_value(db: Session, registration_id: int, value_type: str, value: int, remark: Optional[str] = None) -> ValueReport:
    if not (value_type or "").strip():
        raise ValidationFailedError("평가 유형이 필요합니다.")
    registration_service.get_registration(db, registration_id)
    row = ValueReport(
        registration_id=registration_id,
        value_type=value_type.strip(),
        value=value,
        remark=remark,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_value(db: Session, registration_id: int, value_id: int, payload: dict) -> ValueReport:
    row = _get_value(db, registration_id, value_id)
    if "value_type" in payload and not (payload["value_type"] or "").strip():
        raise ValidationFailedError("평가 유형이 필요합니다.")
    for k, v in payload.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row


def delete_value(db: Session, registration_id: int, value_id: int):
    row = _get_value(db, registration_id, value_id)
    db.delete(row)
    db.commit()
