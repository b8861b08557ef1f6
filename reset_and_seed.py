#!/usr/bin/env python3
"""
Database Reset and Seed Script
데이터베이스 리셋 및 시드 데이터 생성 스크립트

    python reset_and_seed.py           # 테이블 재생성 + 관리자/샘플 게시글
    python reset_and_seed.py --keep    # 기존 데이터 유지, 빈 테이블만 채움
"""

import argparse
import asyncio

from app.core.config import settings
from app.db.database import Database
from app.db.init_data import create_default_admin, seed_sample_posts


async def reset_database(db: Database, drop: bool):
    """테이블 초기화"""
    if drop:
        print("기존 테이블 삭제...")
        await db.drop_tables()

    print("데이터베이스 테이블 생성...")
    await db.create_tables()
    print("테이블 생성 완료")


async def seed_database(db: Database):
    """시드 데이터 생성"""
    print("\n시드 데이터 생성 시작...")

    async with db.session_factory() as session:
        await create_default_admin(session, settings)
        created = await seed_sample_posts(session)

    print(f"시드 데이터 생성 완료 (게시글 {created}개)")


async def main(drop: bool = True):
    print("=== 데이터베이스 리셋 및 시드 데이터 생성 ===")
    db = Database.from_settings(settings)

    try:
        await reset_database(db, drop)
        await seed_database(db)

        print("\n" + "=" * 50)
        print("데이터베이스 리셋 및 시드 데이터 생성 완료!")
        print(f"관리자 계정: {settings.ADMIN_USERNAME}")
    finally:
        await db.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="데이터베이스 리셋 및 시드")
    parser.add_argument("--keep", action="store_true", help="기존 테이블을 삭제하지 않음")
    args = parser.parse_args()
    asyncio.run(main(drop=not args.keep))
