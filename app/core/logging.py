"""
Secure logging system for Sharing Love API
민감한 정보 로깅 방지 및 보안 로깅
"""

import logging
import re
import json
from typing import Any, Dict
from datetime import datetime, timezone


class SecureFormatter(logging.Formatter):
    """민감한 정보를 마스킹하는 로그 포매터"""

    SENSITIVE_PATTERNS = [
        # 패스워드 관련
        (r'(?i)"(password|pwd|passwd)"\s*:\s*"[^"]*"', r'"\1": "***"'),
        (r'(?i)(password|pwd|passwd)=([^&\s]+)', r'\1=***'),

        # JWT 토큰
        (r'[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_]{10,}', '***'),

        # 쿠키 헤더
        (r'(?i)(admin-token)=([^;\s]+)', r'\1=***'),
    ]

    def format(self, record: logging.LogRecord) -> str:
        """로그 레코드를 포맷하고 민감한 정보를 마스킹"""
        formatted = super().format(record)

        for pattern, replacement in self.SENSITIVE_PATTERNS:
            formatted = re.sub(pattern, replacement, formatted)

        return formatted


class SecurityLogger:
    """보안 이벤트 전용 로거"""

    def __init__(self, name: str = "app.security"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

        if not self.logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(
                SecureFormatter(
                    fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                )
            )
            self.logger.addHandler(console_handler)

    def _event(self, event_type: str, **fields: Any) -> str:
        event_data = {"event_type": event_type, **fields}
        event_data["timestamp"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(event_data, ensure_ascii=False)

    def log_login_attempt(self, username: str, success: bool, ip: str, user_agent: str = ""):
        """로그인 시도 기록"""
        message = self._event(
            "login_attempt",
            username=username,
            success=success,
            ip=ip,
            user_agent=user_agent[:100],
        )
        level = logging.INFO if success else logging.WARNING
        self.logger.log(level, f"Login attempt: {message}")

    def log_logout(self, username: str, ip: str):
        self.logger.info(f"Logout: {self._event('logout', username=username, ip=ip)}")

    def log_suspicious_activity(self, activity: str, details: Dict[str, Any], ip: str):
        """의심스러운 활동 기록"""
        message = self._event("suspicious_activity", activity=activity, details=details, ip=ip)
        self.logger.warning(f"Suspicious activity: {message}")


# 전역 보안 로거 인스턴스
security_logger = SecurityLogger()


def setup_application_logging(debug: bool = False) -> logging.Logger:
    """애플리케이션 로깅 설정"""
    root_logger = logging.getLogger("app")
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            SecureFormatter(
                fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )
        )
        root_logger.addHandler(console_handler)

    # SQL 쿼리 로그 비활성화
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return root_logger
