from fastapi import APIRouter

from app.api.endpoints import auth, posts, upload, health

api_router = APIRouter()

# 인증 라우터
api_router.include_router(auth.router, prefix="/auth", tags=["인증"])

# 게시판 라우터
api_router.include_router(posts.router, prefix="/posts", tags=["게시판"])

# 파일 업로드 라우터
api_router.include_router(upload.router, prefix="/upload", tags=["파일 업로드"])

# 시스템 상태
api_router.include_router(health.router, prefix="/health", tags=["시스템상태"])
