from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, FileResponse
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import AppError, UploadedFileNotFoundError, ValidationError
from app.core.file_upload import FileUploadManager
from app.core.logging import setup_application_logging
from app.core.storage import create_storage
from app.db.database import Database
from app.db.init_data import init_database_data
from app.api.router import api_router
from app.middleware.simple_performance import SimplePerformanceMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    config: Settings = app.state.settings
    db: Database = app.state.db
    logger.info("Starting Sharing Love API...")

    await db.create_tables()
    async with db.session_factory() as session:
        await init_database_data(session, config)
    logger.info("Database ready")

    await app.state.file_manager.ensure_upload_dir()
    logger.info(f"Storage ready: {config.STORAGE_TYPE}")

    yield

    # Shutdown
    await db.dispose()
    logger.info("Sharing Love API shutdown completed")


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    message = error.get("msg", "")
    return f"{ValidationError.default_message} ({location}: {message})" if location else ValidationError.default_message


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=ValidationError.status_code,
            content={"detail": _first_validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # 내부 오류 내용은 로그에만 남긴다
        logger.exception(f"[ERROR] {type(exc).__name__} on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": AppError.default_message})


def create_app(config: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    config = config or default_settings
    setup_application_logging(debug=config.DEBUG)

    app = FastAPI(
        title="Sharing Love API",
        description="사랑나눔복지센터 홈페이지 게시판/관리자 API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.db = database or Database.from_settings(config)
    app.state.file_manager = FileUploadManager.from_settings(config, create_storage(config))

    app.add_middleware(SimplePerformanceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,  # 세션 쿠키 인증을 위해 필수
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    if config.STORAGE_TYPE == "local":
        upload_dir = Path(config.UPLOAD_DIR)

        @app.get("/uploads/{bucket}/{filename}", include_in_schema=False)
        async def serve_uploaded_file(bucket: str, filename: str):
            """업로드된 파일 직접 서빙"""
            file_path = upload_dir / bucket / filename

            # 보안: 경로 탐색 방지
            inside = file_path.resolve().is_relative_to(upload_dir.resolve())
            if not inside or not file_path.is_file():
                raise UploadedFileNotFoundError()

            return FileResponse(file_path)

    @app.get("/")
    async def root():
        return {"message": "Sharing Love API", "version": app.version}

    return app


app = create_app()
