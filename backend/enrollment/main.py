"""FastAPI 애플리케이션 진입점. 미들웨어, 오류 핸들러, API 라우터를 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from enrollment.config import settings
from enrollment.database import Base, engine
import enrollment.models  # noqa: F401 - 모델 import로 metadata 등록
from enrollment.routers import auth, registrations, classes, payments, certificates, notifications
from enrollment.utils.errors import EnrollmentError, InternalError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Train4Best 수강 등록/결제/수료증 시스템",
    description="교육 과정 수강 등록, 결제 검증, 정원 관리, 수료증 발급/만료를 담당하는 코어 서비스",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(registrations.router)
app.include_router(classes.router)
app.include_router(payments.router)
app.include_router(certificates.router)
app.include_router(notifications.router)


@app.exception_handler(EnrollmentError)
def handle_enrollment_error(request: Request, exc: EnrollmentError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "code": exc.code})


@app.exception_handler(SQLAlchemyError)
def handle_storage_error(request: Request, exc: SQLAlchemyError):
    logger.exception("[storage] %s %s failed", request.method, request.url.path)
    return handle_enrollment_error(
        request, InternalError("저장소 처리 중 오류가 발생했습니다. 잠시 후 다시 시도해 주세요.")
    )


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Train4Best enrollment core"}
