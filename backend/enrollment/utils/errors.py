"""도메인 오류 분류입니다.

서비스 레이어는 ``HTTPException`` 하위 클래스를 던지되, 호출자가 복구 가능성에 따라
분기할 수 있도록 오류마다 고정된 ``code``를 함께 싣습니다.

- not_found / validation / conflict / capacity: 입력을 고친 뒤에만 재시도
- invalid_state: 대상이 이미 다른 상태로 전이됨
- exhausted: 충돌 재시도 예산 소진 (Conflict 계열), 잠시 후 재시도 가능
- internal: 저장소/전송 실패, 호출자가 backoff 후 재시도
"""

from typing import Optional

from fastapi import HTTPException, status


class EnrollmentError(HTTPException):
    code = "internal"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "처리 중 오류가 발생했습니다."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code_default, detail=detail or self.default_detail)


class NotFoundError(EnrollmentError):
    code = "not_found"
    status_code_default = status.HTTP_404_NOT_FOUND
    default_detail = "대상을 찾을 수 없습니다."


class ValidationFailedError(EnrollmentError):
    code = "validation"
    status_code_default = status.HTTP_400_BAD_REQUEST
    default_detail = "입력값이 올바르지 않습니다."


class ConflictError(EnrollmentError):
    code = "conflict"
    status_code_default = status.HTTP_409_CONFLICT
    default_detail = "이미 존재하는 데이터와 충돌합니다."


class CapacityError(EnrollmentError):
    code = "capacity"
    status_code_default = status.HTTP_409_CONFLICT
    default_detail = "정원이 마감되었거나 등록 기간이 아닙니다."


class InvalidStateError(EnrollmentError):
    code = "invalid_state"
    status_code_default = status.HTTP_409_CONFLICT
    default_detail = "현재 상태에서는 처리할 수 없습니다."


class ExhaustedError(ConflictError):
    code = "exhausted"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "고유 번호 생성 재시도 횟수를 초과했습니다."


class InternalError(EnrollmentError):
    pass
