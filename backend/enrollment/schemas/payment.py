"""Payment 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from enrollment.schemas.registration import RegistrationOut


class PaymentProofCreate(BaseModel):
    registration_id: int
    amount: int
    payment_method: Optional[str] = None
    # 파일 저장소가 돌려준 증빙 파일 참조(URL/경로)
    proof_url: str


class PaymentVerifyRequest(BaseModel):
    approve: bool


class PaymentOut(BaseModel):
    payment_id: int
    registration_id: int
    payment_date: datetime
    amount: int
    payment_method: Optional[str] = None
    reference_number: str
    proof_url: Optional[str] = None
    status: str
    verified_by: Optional[int] = None
    verified_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentVerificationOut(BaseModel):
    payment: PaymentOut
    registration: RegistrationOut
