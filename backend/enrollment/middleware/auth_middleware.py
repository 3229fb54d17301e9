"""Bearer 토큰 인증과 역할 기반 접근 제어 의존성입니다."""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from enrollment.config import settings
from enrollment.database import get_db
from enrollment.models.user import User
from enrollment.services.auth_service import ALGORITHM
from enrollment.utils.permissions import ADMIN, ALL_ROLES

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")


def resolve_user(db: Session, token: str) -> User:
    payload = decode_token(token)
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.user_id == int(subject), User.is_active == True).first()
    if not user:
        raise _unauthorized("User not found or inactive")
    # 발급 이후 역할이 바뀐 계정은 재로그인해야 한다.
    if payload.get("role") != user.role:
        logger.info("[auth] stale role claim for user %s", user.user_id)
        raise _unauthorized("Role changed, please sign in again")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    return resolve_user(db, credentials.credentials)


def require_roles(*roles: str):
    unknown = set(roles) - set(ALL_ROLES)
    if unknown:
        raise ValueError(f"unknown role(s): {', '.join(sorted(unknown))}")

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if credentials is None:
        return None
    try:
        return resolve_user(db, credentials.credentials)
    except HTTPException:
        return None


def require_admin_or_cron(
    x_cron_secret: Optional[str] = Header(None),
    current_user: Optional[User] = Depends(get_optional_user),
) -> Optional[User]:
    # 외부 스케줄러는 사용자 토큰 대신 공유 비밀값으로 호출한다.
    if settings.CRON_SECRET and x_cron_secret == settings.CRON_SECRET:
        return current_user
    if current_user is not None and current_user.role == ADMIN:
        return current_user
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Requires role: admin or scheduler secret")
