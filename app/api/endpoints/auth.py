from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.api.deps import get_admin_service, get_optional_admin, get_client_ip
from app.schemas.auth import LoginRequest, LoginResponse, MeResponse
from app.services.admin_service import AdminService
from app.core.security import create_access_token
from app.core.config import settings
from app.core.exceptions import InvalidCredentialsError
from app.core.logging import security_logger

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AdminService = Depends(get_admin_service),
):
    """관리자 로그인. 성공 시 세션 쿠키(admin-token) 발급"""
    client_ip = get_client_ip(request)
    user_agent = request.headers.get("user-agent", "")

    admin = await service.authenticate(login_data.username, login_data.password)

    if admin is None:
        security_logger.log_login_attempt(
            username=login_data.username,
            success=False,
            ip=client_ip,
            user_agent=user_agent
        )
        raise InvalidCredentialsError()

    token = create_access_token(admin_id=admin.id, username=admin.username)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )

    security_logger.log_login_attempt(
        username=login_data.username,
        success=True,
        ip=client_ip,
        user_agent=user_agent
    )

    return LoginResponse(success=True, username=admin.username)


@router.post("/logout")
async def logout(request: Request, response: Response, admin=Depends(get_optional_admin)):
    """로그아웃 (세션 쿠키 삭제, 여러 번 호출해도 성공)"""
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    if admin is not None:
        security_logger.log_logout(admin.username, get_client_ip(request))
    return {"success": True}


@router.get("/me", response_model=MeResponse)
async def me(admin=Depends(get_optional_admin)):
    """현재 로그인한 관리자 정보"""
    if admin is None:
        return JSONResponse(status_code=401, content={"authenticated": False})
    return MeResponse(authenticated=True, user=admin)
