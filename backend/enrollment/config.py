"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./train_enrollment.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # SQLite 동시 쓰기 시 잠금 대기 시간(초)
    SQLITE_BUSY_TIMEOUT: float = 30.0

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Certificate
    CERTIFICATE_NUMBER_MAX_ATTEMPTS: int = 5
    CERTIFICATE_VALIDITY_DAYS: int = 365

    # 외부 스케줄러가 만료 처리 엔드포인트를 호출할 때 사용하는 공유 비밀값
    CRON_SECRET: str = ""

    # Mail relay
    MAIL_ENABLED: bool = False
    MAIL_RELAY_URL: str = "http://localhost:8025/api/send"
    MAIL_API_KEY: str = ""
    MAIL_SENDER: str = "no-reply@train4best.local"
    MAIL_TIMEOUT_SECONDS: float = 10.0

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
