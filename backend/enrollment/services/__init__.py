"""서비스 레이어 패키지 초기화 모듈입니다."""

from enrollment.services import (
    auth_service,
    notification_service,
    quota_service,
    registration_service,
    payment_service,
    verification_service,
    certificate_service,
    value_report_service,
)
