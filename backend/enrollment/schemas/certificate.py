"""Certificate 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import date


class CertificateCreate(BaseModel):
    course_id: int
    name: str
    issue_date: date
    expiry_date: date
    participant_id: Optional[int] = None
    instructor_id: Optional[int] = None
    registration_id: Optional[int] = None
    certificate_number: Optional[str] = None
    pdf_url: Optional[str] = None
    drive_link: Optional[str] = None


class RegistrationCertificateCreate(BaseModel):
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    pdf_url: Optional[str] = None
    drive_link: Optional[str] = None


class CertificateOut(BaseModel):
    certificate_id: int
    certificate_number: str
    name: str
    issue_date: date
    expiry_date: date
    status: str
    participant_id: Optional[int] = None
    instructor_id: Optional[int] = None
    course_id: int
    registration_id: Optional[int] = None
    pdf_url: Optional[str] = None
    drive_link: Optional[str] = None

    model_config = {"from_attributes": True}


class SweepResultOut(BaseModel):
    updated: int
