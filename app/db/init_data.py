from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from app.core.config import Settings
from app.models import Post, BudgetType
from app.schemas.post import NoticePostInput, BudgetPostInput, ResourcePostInput, GalleryPostInput
from app.services.admin_service import AdminService
from app.services.post_service import PostService

logger = logging.getLogger(__name__)


async def create_default_admin(db: AsyncSession, settings: Settings):
    """기본 관리자 계정 생성 (이미 있으면 건너뜀)"""
    return await AdminService(db).ensure_admin(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)


SAMPLE_POSTS = [
    NoticePostInput(
        board_type="NOTICE",
        title="[공지] 사랑나눔복지센터 홈페이지를 방문해주셔서 감사합니다",
        content="<p>안녕하세요. 사랑나눔복지센터 홈페이지를 방문해주셔서 감사합니다.</p>",
        is_pinned=True,
    ),
    NoticePostInput(
        board_type="NOTICE",
        title="2025년 설 연휴 운영 안내",
        content="<p>1월 28일(화)부터 1월 30일(목)까지 휴무입니다.</p>",
    ),
    NoticePostInput(
        board_type="NOTICE",
        title="활동지원사 교육 일정 안내",
        content="<p>2025년 상반기 활동지원사 교육 일정을 안내드립니다.</p>",
    ),
    BudgetPostInput(
        board_type="BUDGET",
        title="2024년 결산서 공개",
        content="<p>2024년 사랑나눔복지센터 결산서를 공개합니다.</p>",
        year=2024,
        budget_type=BudgetType.SETTLEMENT,
        attachments=[{
            "filename_original": "2024_결산서.pdf",
            "file_url": "/uploads/documents/sample-2024-settlement.pdf",
            "file_size": 0,
        }],
    ),
    BudgetPostInput(
        board_type="BUDGET",
        title="2025년 예산안",
        content="<p>2025년 사랑나눔복지센터 예산안입니다.</p>",
        year=2025,
        budget_type=BudgetType.BUDGET,
        attachments=[{
            "filename_original": "2025_예산안.pdf",
            "file_url": "/uploads/documents/sample-2025-budget.pdf",
            "file_size": 0,
        }],
    ),
    ResourcePostInput(
        board_type="RESOURCE",
        title="장애인활동지원 서비스 이용 안내",
        content="<p>장애인활동지원 서비스 이용 방법에 대한 안내 자료입니다.</p>",
    ),
    GalleryPostInput(
        board_type="GALLERY",
        title="2024년 송년 행사",
        content="<p>이용자와 활동지원사가 함께한 송년 행사 사진입니다.</p>",
        thumbnail_url="/uploads/images/sample-year-end.jpg",
    ),
]


async def seed_sample_posts(db: AsyncSession) -> int:
    """게시글이 하나도 없을 때만 샘플 게시글 생성"""
    existing = (await db.execute(select(func.count(Post.id)))).scalar() or 0
    if existing:
        logger.info(f"Posts already exist ({existing}), skipping sample data")
        return 0

    service = PostService(db)
    for data in SAMPLE_POSTS:
        await service.create_post(data)

    logger.info(f"Created {len(SAMPLE_POSTS)} sample posts")
    return len(SAMPLE_POSTS)


async def init_database_data(db: AsyncSession, settings: Settings):
    """애플리케이션 시작 시 필요한 초기 데이터"""
    await create_default_admin(db, settings)
