"""
게시글 저장소
공지사항/예산결산/자료실/갤러리 게시글과 첨부파일의 조회, 생성, 수정, 삭제를 담당한다.
"""
import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy import select, and_, or_, func, update, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from app.core.exceptions import (
    PostNotFoundError,
    PinLimitExceededError,
    MissingAttachmentError,
    MissingThumbnailError,
    ValidationError,
)
from app.models import Post, Attachment, BoardType, BudgetType, MAX_PINNED_NOTICES
from app.schemas.post import AttachmentInput, PostBase

logger = logging.getLogger(__name__)

# 게시판 전용 컬럼. 입력 variant가 채우지 않은 컬럼은 항상 NULL로 기록된다.
BOARD_COLUMNS = ("is_pinned", "year", "budget_type", "thumbnail_url")

# 고정 공지 개수 검사를 직렬화하는 PostgreSQL advisory lock 키
PIN_LOCK_KEY = 7_310_001


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_posts(
        self,
        board_type: Optional[BoardType] = None,
        search: Optional[str] = None,
        year: Optional[int] = None,
        budget_type: Optional[BudgetType] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Post], int]:
        """공개된 게시글 목록과 전체 개수 조회"""
        conditions = [Post.is_published == True]  # noqa: E712

        if board_type:
            conditions.append(Post.board_type == board_type)
        if search:
            conditions.append(
                or_(
                    Post.title.contains(search, autoescape=True),
                    Post.content.contains(search, autoescape=True),
                )
            )
        if year is not None:
            conditions.append(Post.year == year)
        if budget_type:
            conditions.append(Post.budget_type == budget_type)

        count_query = select(func.count(Post.id)).where(and_(*conditions))
        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            select(Post)
            .options(selectinload(Post.attachments))
            .where(and_(*conditions))
            .order_by(*self._ordering(board_type))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    def _ordering(board_type: Optional[BoardType]):
        if board_type == BoardType.NOTICE:
            # 고정 공지 우선, 최신순
            return (Post.is_pinned.desc().nulls_last(), Post.created_at.desc(), Post.id.desc())
        if board_type == BoardType.BUDGET:
            return (Post.year.desc().nulls_last(), Post.created_at.desc(), Post.id.desc())
        return (Post.created_at.desc(), Post.id.desc())

    async def get_post(self, post_id: int, increment_views: bool = True) -> Post:
        """게시글 상세 조회. 조회할 때마다 조회수가 1 증가한다"""
        post = await self._get_or_404(post_id)

        if increment_views:
            # 읽은 값에 1을 더해 기록한다. 동시 조회 시 증가분이 누락될 수 있다.
            new_views = post.views + 1
            await self.db.execute(
                update(Post)
                .where(Post.id == post.id)
                .values(views=new_views, updated_at=Post.updated_at)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
            set_committed_value(post, "views", new_views)

        return post

    async def create_post(self, data: PostBase) -> Post:
        """게시글 생성 (첨부파일 포함, 단일 트랜잭션)"""
        board_type = BoardType(data.board_type)
        columns = self._board_columns(data)

        if board_type == BoardType.BUDGET and not data.attachments:
            raise MissingAttachmentError()
        if board_type == BoardType.GALLERY and not columns["thumbnail_url"]:
            raise MissingThumbnailError()
        if columns["is_pinned"]:
            await self._ensure_pin_available()

        post = Post(
            board_type=board_type,
            title=data.title,
            content=data.content,
            is_published=data.is_published,
            views=0,
            **columns,
        )
        post.attachments = self._build_attachments(data.attachments)

        self.db.add(post)
        if columns["is_pinned"]:
            await self._recheck_pin_limit()
        await self.db.commit()

        logger.info(f"Post created: id={post.id} board_type={board_type.value}")
        return post

    async def update_post(self, post_id: int, data: PostBase) -> Post:
        """게시글 수정. 첨부파일은 요청 목록으로 통째로 교체된다"""
        post = await self._get_or_404(post_id)

        if BoardType(data.board_type) != post.board_type:
            raise ValidationError("게시판 종류는 변경할 수 없습니다.")

        columns = self._board_columns(data)
        if columns["is_pinned"]:
            await self._ensure_pin_available(exclude_id=post.id)

        post.title = data.title
        post.content = data.content
        post.is_published = data.is_published
        for key, value in columns.items():
            setattr(post, key, value)

        # 기존 첨부파일은 delete-orphan 으로 삭제되고 새 목록이 생성된다
        post.attachments = self._build_attachments(data.attachments)

        if columns["is_pinned"]:
            await self._recheck_pin_limit()
        await self.db.commit()

        logger.info(f"Post updated: id={post.id}")
        return post

    async def delete_post(self, post_id: int) -> None:
        """게시글 삭제 (첨부파일도 함께 삭제). 없는 게시글이면 PostNotFoundError"""
        post = await self._get_or_404(post_id)
        await self.db.delete(post)
        await self.db.commit()
        logger.info(f"Post deleted: id={post_id}")

    async def count_pinned_notices(self, exclude_id: Optional[int] = None) -> int:
        conditions = [Post.board_type == BoardType.NOTICE, Post.is_pinned == True]  # noqa: E712
        if exclude_id is not None:
            conditions.append(Post.id != exclude_id)
        result = await self.db.execute(select(func.count(Post.id)).where(and_(*conditions)))
        return result.scalar() or 0

    async def _ensure_pin_available(self, exclude_id: Optional[int] = None):
        if self.db.bind is not None and self.db.bind.dialect.name == "postgresql":
            # 트랜잭션이 끝날 때까지 다른 고정 공지 쓰기를 대기시킨다
            await self.db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": PIN_LOCK_KEY})

        if await self.count_pinned_notices(exclude_id=exclude_id) >= MAX_PINNED_NOTICES:
            raise PinLimitExceededError()

    async def _recheck_pin_limit(self):
        """쓰기 후 같은 트랜잭션 안에서 고정 공지 수를 다시 센다

        동시에 들어온 요청이 모두 사전 검사를 통과하더라도, 쓰기 잠금을 나중에 얻은
        쪽은 앞선 커밋을 보게 되므로 여기서 한도 초과가 드러난다.
        """
        await self.db.flush()
        if await self.count_pinned_notices() > MAX_PINNED_NOTICES:
            await self.db.rollback()
            raise PinLimitExceededError()

    async def _get_or_404(self, post_id: int) -> Post:
        query = select(Post).options(selectinload(Post.attachments)).where(Post.id == post_id)
        result = await self.db.execute(query)
        post = result.scalar_one_or_none()
        if post is None:
            raise PostNotFoundError()
        return post

    @staticmethod
    def _board_columns(data: PostBase) -> dict:
        columns = dict.fromkeys(BOARD_COLUMNS)
        columns.update(data.board_columns())
        return columns

    @staticmethod
    def _build_attachments(attachments: List[AttachmentInput]) -> List[Attachment]:
        return [
            Attachment(
                filename_original=att.filename_original,
                file_url=att.file_url,
                file_size=att.file_size,
                mime_type=att.mime_type,
                is_image=att.is_image,
                display_order=index,
            )
            for index, att in enumerate(attachments)
        ]
