"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class AccountOut(BaseModel):
    user_id: int
    email: str
    username: str
    role: str
    is_active: bool
    created_at: datetime
    # 역할별 프로필 (참가자/강사 계정만 채워짐)
    participant_id: Optional[int] = None
    instructor_id: Optional[int] = None
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=100)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    account: AccountOut
