import logging
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.models import Base

logger = logging.getLogger(__name__)


class Database:
    """엔진과 세션 생성기를 묶은 데이터베이스 핸들

    애플리케이션 시작 시 한 번 생성되어 ``app.state.db`` 에 보관되고,
    종료 시 ``dispose()`` 로 커넥션 풀을 정리한다.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_options = {"echo": echo, "future": True, "pool_pre_ping": True}

        if url.startswith("postgresql"):
            engine_options.update(
                pool_recycle=300,  # 5분마다 연결 갱신
                pool_timeout=30,
                pool_size=10,
                max_overflow=20,
            )

        self.engine = create_async_engine(url, **engine_options)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.get_database_url, echo=settings.DB_ECHO)

    async def session(self) -> AsyncIterator[AsyncSession]:
        """요청 단위 세션. 정상 종료 시 커밋, 예외 시 롤백"""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self):
        """데이터베이스 테이블 생성"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    async def dispose(self):
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.db


async def get_async_db(request: Request) -> AsyncIterator[AsyncSession]:
    """비동기 데이터베이스 세션 의존성"""
    db: Optional[Database] = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not configured on app.state")
    async for session in db.session():
        yield session
