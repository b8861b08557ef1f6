from datetime import datetime, timedelta, timezone
from typing import Optional, Any, Dict
from jose import JWTError, jwt
from passlib.context import CryptContext
import logging
import secrets

from app.core.config import settings

logger = logging.getLogger(__name__)

# 패스워드 해싱 컨텍스트
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12
)

# 검증 시 반드시 있어야 하는 클레임
REQUIRED_CLAIMS = ("sub", "exp", "iat", "adminId", "username")


def create_access_token(
    admin_id: int,
    username: str,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
) -> str:
    """관리자 세션 토큰 생성 (HS256, 기본 7일)"""
    now = datetime.now(timezone.utc)

    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {
        "sub": str(admin_id),
        "adminId": admin_id,
        "username": username,
        "iat": now,
        "exp": now + expires_delta,
        "jti": secrets.token_urlsafe(16),
        "type": "access",
    }

    return jwt.encode(to_encode, secret_key or settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: Optional[str], secret_key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """토큰 검증. 유효하지 않으면 예외 대신 None 반환"""
    if not token or not isinstance(token, str):
        return None

    try:
        payload = jwt.decode(
            token, secret_key or settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None

    if not all(key in payload for key in REQUIRED_CLAIMS):
        return None

    if payload.get("type") != "access":
        return None

    # jose가 exp를 이미 검사하지만 만료 시점을 한 번 더 확인
    exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    if datetime.now(timezone.utc) >= exp:
        return None

    return payload


def get_password_hash(password: str) -> str:
    """패스워드 해싱 (bcrypt, 솔트 자동 생성)"""
    if not password:
        raise ValueError("패스워드가 비어 있습니다.")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """패스워드 검증. 해시가 없거나 손상된 경우 False"""
    if not hashed_password:
        # 사용자 존재 여부가 응답 시간으로 드러나지 않도록 더미 검증 수행
        pwd_context.dummy_verify()
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False
