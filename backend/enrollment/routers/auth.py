"""Auth 기능 API 라우터입니다. SSO 확인 후 토큰 발급과 현재 계정 조회를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from enrollment.config import settings
from enrollment.database import get_db
from enrollment.middleware.auth_middleware import get_current_user
from enrollment.models.user import User
from enrollment.schemas.user import AccountOut, LoginRequest, TokenResponse
from enrollment.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, request.email)
    return {
        "access_token": auth_service.create_access_token(user),
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "account": auth_service.profile_of(user),
    }


@router.get("/me", response_model=AccountOut)
def me(current_user: User = Depends(get_current_user)):
    return auth_service.profile_of(current_user)
