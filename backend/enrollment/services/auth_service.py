"""Auth Service 도메인 서비스 레이어입니다. 외부 SSO가 확인한 사용자에게 bearer 토큰을 발급합니다.

비밀번호 검증은 SSO 쪽 책임이며, 여기서는 이메일로 활성 계정과 역할 프로필만 확인합니다.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from enrollment.models.user import User
from enrollment.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def create_access_token(user: User, expires_in: Optional[timedelta] = None) -> str:
    issued = datetime.now(timezone.utc)
    expire = issued + (expires_in or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": str(user.user_id), "role": user.role, "iat": issued, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def authenticate(db: Session, email: str) -> User:
    address = normalize_email(email)
    user = db.query(User).filter(User.email == address, User.is_active == True).first()
    if not user:
        logger.info("[auth] login rejected for %s", address or "<empty>")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="등록된 활성 계정이 없습니다. 관리자에게 문의해 주세요.",
        )
    return user


def profile_of(user: User) -> dict:
    participant = user.participant_profile
    instructor = user.instructor_profile
    return {
        "user_id": user.user_id,
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "participant_id": participant.participant_id if participant else None,
        "instructor_id": instructor.instructor_id if instructor else None,
        "full_name": (participant or instructor).full_name if (participant or instructor) else None,
    }
