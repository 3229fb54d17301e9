"""Notifications 기능 API 라우터입니다. 결제/수료증 알림을 수신자 본인에게만 노출합니다."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from enrollment.database import get_db
from enrollment.middleware.auth_middleware import get_current_user
from enrollment.models.user import User
from enrollment.schemas.notification import NotificationOut, UnreadCountOut
from enrollment.services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def my_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.get_notifications(db, current_user.user_id, unread_only, limit)


@router.get("/unread-count", response_model=UnreadCountOut)
def unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"unread": notification_service.count_unread(db, current_user.user_id)}


@router.patch("/{noti_id}/read", response_model=NotificationOut)
def read_one(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return notification_service.mark_read(db, noti_id, current_user.user_id)


@router.post("/read-all", response_model=UnreadCountOut)
def read_all(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    notification_service.mark_all_read(db, current_user.user_id)
    return {"unread": 0}
