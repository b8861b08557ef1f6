from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
import logging

from app.models.admin import Admin
from app.core.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_admin_by_username(self, username: str) -> Optional[Admin]:
        """아이디로 관리자 조회"""
        result = await self.db.execute(select(Admin).where(Admin.username == username))
        return result.scalar_one_or_none()

    async def authenticate(self, username: str, password: str) -> Optional[Admin]:
        """아이디/비밀번호 확인. 실패 사유는 구분하지 않고 None 반환"""
        admin = await self.get_admin_by_username(username)
        if not verify_password(password, admin.password_hash if admin else None):
            return None
        return admin

    async def create_admin(self, username: str, password: str) -> Admin:
        admin = Admin(username=username, password_hash=get_password_hash(password))
        self.db.add(admin)
        await self.db.flush()
        return admin

    async def ensure_admin(self, username: str, password: str) -> Admin:
        """관리자 계정이 없으면 생성 (이미 있으면 그대로 둔다)"""
        existing = await self.get_admin_by_username(username)
        if existing:
            return existing

        admin = await self.create_admin(username, password)
        await self.db.commit()
        logger.info(f"Default admin account created: {username}")
        return admin
