"""메일 릴레이 HTTP 클라이언트입니다. 템플릿/발송 내부 구현은 릴레이 서비스가 담당합니다."""

import uuid
from typing import Dict, Optional

import httpx

from enrollment.config import settings


class MailClient:
    """설정된 메일 릴레이 엔드포인트로 단건 메일을 전송합니다."""

    def __init__(
        self,
        relay_url: Optional[str] = None,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.relay_url = relay_url or settings.MAIL_RELAY_URL
        self.api_key = api_key if api_key is not None else settings.MAIL_API_KEY
        self.sender = sender or settings.MAIL_SENDER
        self.timeout = float(timeout or settings.MAIL_TIMEOUT_SECONDS)

    def _build_headers(self) -> Dict[str, str]:
        headers = {"X-Message-Id": str(uuid.uuid4())}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def send(self, to: str, subject: str, html: str) -> None:
        response = httpx.post(
            self.relay_url,
            headers=self._build_headers(),
            json={"from": self.sender, "to": to, "subject": subject, "html": html},
            timeout=self.timeout,
        )
        response.raise_for_status()
