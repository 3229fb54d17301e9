"""Registration 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class RegistrationCreate(BaseModel):
    class_id: int
    # 관리자는 임의 참가자를 등록할 수 있고, 참가자는 생략 시 본인으로 등록된다.
    participant_id: Optional[int] = None
    payment_method: Optional[str] = None


class RegistrationOut(BaseModel):
    registration_id: int
    class_id: int
    participant_id: int
    reg_date: datetime
    reg_status: str
    payment_status: str
    payment_amount: int
    payment_method: Optional[str] = None
    present_day: int

    model_config = {"from_attributes": True}


class AttendanceUpdate(BaseModel):
    present_day: int


class ManualPaymentUpdate(BaseModel):
    amount: int = Field(ge=0)
    payment_method: Optional[str] = None
    allow_reversal: bool = False


class QuotaOut(BaseModel):
    class_id: int
    quota: int
    active_registrations: int
    remaining_seats: int
    registration_open: bool
    can_register: bool


class ValueReportCreate(BaseModel):
    value_type: str
    value: int
    remark: Optional[str] = None


class ValueReportUpdate(BaseModel):
    value_type: Optional[str] = None
    value: Optional[int] = None
    remark: Optional[str] = None


class ValueReportOut(BaseModel):
    value_id: int
    registration_id: int
    value_type: str
    value: int
    remark: Optional[str] = None

    model_config = {"from_attributes": True}


class ValueReportPage(BaseModel):
    values: List[ValueReportOut]
    current_page: int
    total_pages: int
    total_values: int
