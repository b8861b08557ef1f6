from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.db.database import get_async_db
from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.core.file_upload import FileUploadManager
from app.core.security import verify_token
from app.core.logging import security_logger
from app.schemas.auth import AdminIdentity
from app.services.post_service import PostService
from app.services.admin_service import AdminService

# 쿠키가 없는 API 클라이언트를 위해 Bearer 헤더도 허용
security = HTTPBearer(auto_error=False)


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """세션 쿠키 우선, 없으면 Authorization 헤더에서 토큰 추출"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_optional_admin(token: Optional[str] = Depends(get_token)) -> Optional[AdminIdentity]:
    """선택적 관리자 인증 (토큰이 없거나 유효하지 않으면 None)"""
    payload = verify_token(token)
    if payload is None:
        return None
    return AdminIdentity(admin_id=payload["adminId"], username=payload["username"])


async def get_current_admin(
    request: Request,
    token: Optional[str] = Depends(get_token),
) -> AdminIdentity:
    """관리자 인증 필수. 변경 작업 전에 사용"""
    if not token:
        raise UnauthorizedError()

    admin = await get_optional_admin(token)
    if admin is None:
        security_logger.log_suspicious_activity(
            "invalid_token_access",
            {"path": request.url.path, "token_length": len(token)},
            get_client_ip(request),
        )
        raise UnauthorizedError()

    return admin


def get_post_service(db: AsyncSession = Depends(get_async_db)) -> PostService:
    return PostService(db)


def get_admin_service(db: AsyncSession = Depends(get_async_db)) -> AdminService:
    return AdminService(db)


def get_file_manager(request: Request) -> FileUploadManager:
    return request.app.state.file_manager


def get_client_ip(request: Request) -> str:
    """클라이언트 IP 주소 추출"""
    # X-Forwarded-For 헤더 확인 (프록시/로드밸런서 사용시)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
