import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select, func

from app.core.exceptions import (
    PinLimitExceededError,
    MissingAttachmentError,
    MissingThumbnailError,
    PostNotFoundError,
    ValidationError,
)
from app.models import Attachment, BoardType, BudgetType, MAX_PINNED_NOTICES
from app.schemas.post import NoticePostInput, BudgetPostInput, ResourcePostInput, GalleryPostInput
from app.services.post_service import PostService, PIN_LOCK_KEY


def notice_input(title="공지", **extra):
    return NoticePostInput(board_type="NOTICE", title=title, content="<p>내용</p>", **extra)


def budget_input(title="2024년 결산", attachments=None, **extra):
    if attachments is None:
        attachments = [{"filename_original": "결산서.pdf", "file_url": "/uploads/documents/a.pdf", "file_size": 10}]
    return BudgetPostInput(board_type="BUDGET", title=title, attachments=attachments, **extra)


async def count_attachments(session):
    return (await session.execute(select(func.count(Attachment.id)))).scalar()


class TestCreatePost:
    async def test_notice_only_stores_pin_column(self, post_service):
        post = await post_service.create_post(notice_input(is_pinned=True))

        assert post.id is not None
        assert post.board_type == BoardType.NOTICE
        assert post.is_pinned is True
        assert post.year is None
        assert post.budget_type is None
        assert post.thumbnail_url is None
        assert post.views == 0

    async def test_resource_leaves_board_columns_null(self, post_service):
        post = await post_service.create_post(ResourcePostInput(board_type="RESOURCE", title="자료"))

        assert post.is_pinned is None
        assert post.year is None
        assert post.thumbnail_url is None

    async def test_budget_requires_attachment(self, post_service):
        with pytest.raises(MissingAttachmentError):
            await post_service.create_post(budget_input(attachments=[]))

    async def test_gallery_requires_thumbnail(self, post_service):
        with pytest.raises(MissingThumbnailError):
            await post_service.create_post(GalleryPostInput(board_type="GALLERY", title="행사"))

    async def test_attachments_keep_input_order(self, post_service):
        post = await post_service.create_post(budget_input(attachments=[
            {"filename_original": "a.pdf", "file_url": "/a.pdf"},
            {"filename_original": "b.xlsx", "file_url": "/b.xlsx"},
        ], year=2024, budget_type=BudgetType.SETTLEMENT))

        assert [a.filename_original for a in post.attachments] == ["a.pdf", "b.xlsx"]
        assert [a.display_order for a in post.attachments] == [0, 1]
        assert post.budget_type == BudgetType.SETTLEMENT


class TestPinLimit:
    async def test_fourth_pinned_notice_rejected(self, post_service):
        for i in range(3):
            await post_service.create_post(notice_input(f"고정 {i}", is_pinned=True))

        with pytest.raises(PinLimitExceededError):
            await post_service.create_post(notice_input("고정 3", is_pinned=True))

        assert await post_service.count_pinned_notices() == 3

    async def test_unpinned_notice_allowed_at_limit(self, post_service):
        for i in range(3):
            await post_service.create_post(notice_input(f"고정 {i}", is_pinned=True))

        post = await post_service.create_post(notice_input("일반"))
        assert post.is_pinned is False

    async def test_update_counts_other_posts_only(self, post_service):
        pinned = [await post_service.create_post(notice_input(f"고정 {i}", is_pinned=True)) for i in range(3)]

        # 이미 고정된 글을 다시 고정 상태로 저장하는 것은 허용
        updated = await post_service.update_post(pinned[0].id, notice_input("수정", is_pinned=True))
        assert updated.title == "수정"

    async def test_update_to_pinned_rejected_at_limit(self, post_service):
        for i in range(3):
            await post_service.create_post(notice_input(f"고정 {i}", is_pinned=True))
        plain = await post_service.create_post(notice_input("일반"))

        with pytest.raises(PinLimitExceededError):
            await post_service.update_post(plain.id, notice_input("일반", is_pinned=True))


class TestConcurrentPins:
    async def _in_own_session(self, database, action):
        async with database.session_factory() as session:
            try:
                await action(PostService(session))
                return "ok"
            except PinLimitExceededError:
                return "rejected"

    async def _pinned_count(self, database):
        async with database.session_factory() as session:
            return await PostService(session).count_pinned_notices()

    async def test_concurrent_creates_stay_within_limit(self, database, post_service):
        for i in range(2):
            await post_service.create_post(notice_input(f"고정 {i}", is_pinned=True))

        results = await asyncio.gather(*(
            self._in_own_session(database, lambda s, i=i: s.create_post(notice_input(f"동시 {i}", is_pinned=True)))
            for i in range(3)
        ))

        assert sorted(results) == ["ok", "rejected", "rejected"]
        assert await self._pinned_count(database) == MAX_PINNED_NOTICES

    async def test_concurrent_updates_stay_within_limit(self, database, post_service):
        await post_service.create_post(notice_input("고정", is_pinned=True))
        plain = [await post_service.create_post(notice_input(f"일반 {i}")) for i in range(3)]

        results = await asyncio.gather(*(
            self._in_own_session(database, lambda s, p=p: s.update_post(p.id, notice_input(p.title, is_pinned=True)))
            for p in plain
        ))

        assert sorted(results) == ["ok", "ok", "rejected"]
        assert await self._pinned_count(database) == MAX_PINNED_NOTICES


class TestPinLockOnPostgres:
    async def test_advisory_lock_taken_before_count(self):
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        db = MagicMock()
        db.bind.dialect.name = "postgresql"
        db.execute = AsyncMock(side_effect=[None, count_result])

        await PostService(db)._ensure_pin_available()

        lock_statement = db.execute.await_args_list[0].args[0]
        assert "pg_advisory_xact_lock" in str(lock_statement)
        assert db.execute.await_args_list[0].args[1] == {"key": PIN_LOCK_KEY}

    async def test_no_lock_on_other_databases(self):
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        db = MagicMock()
        db.bind.dialect.name = "sqlite"
        db.execute = AsyncMock(return_value=count_result)

        await PostService(db)._ensure_pin_available()

        assert db.execute.await_count == 1


class TestGetPost:
    async def test_each_read_increments_views(self, post_service):
        created = await post_service.create_post(notice_input())

        first = await post_service.get_post(created.id)
        assert first.views == 1
        second = await post_service.get_post(created.id)
        assert second.views == 2

    async def test_read_without_increment(self, post_service):
        created = await post_service.create_post(notice_input())
        post = await post_service.get_post(created.id, increment_views=False)
        assert post.views == 0

    async def test_missing_post(self, post_service):
        with pytest.raises(PostNotFoundError):
            await post_service.get_post(9999)


class TestUpdatePost:
    async def test_attachments_are_replaced(self, post_service, session):
        post = await post_service.create_post(budget_input(attachments=[
            {"filename_original": "old-1.pdf", "file_url": "/old-1.pdf"},
            {"filename_original": "old-2.pdf", "file_url": "/old-2.pdf"},
        ]))

        updated = await post_service.update_post(post.id, budget_input(attachments=[
            {"filename_original": "new.pdf", "file_url": "/new.pdf"},
        ]))

        assert [a.filename_original for a in updated.attachments] == ["new.pdf"]
        assert await count_attachments(session) == 1

    async def test_board_type_cannot_change(self, post_service):
        post = await post_service.create_post(notice_input())

        with pytest.raises(ValidationError):
            await post_service.update_post(post.id, ResourcePostInput(board_type="RESOURCE", title="자료"))

    async def test_missing_post(self, post_service):
        with pytest.raises(PostNotFoundError):
            await post_service.update_post(9999, notice_input())


class TestDeletePost:
    async def test_delete_removes_attachments(self, post_service, session):
        post = await post_service.create_post(budget_input())
        assert await count_attachments(session) == 1

        await post_service.delete_post(post.id)

        assert await count_attachments(session) == 0
        with pytest.raises(PostNotFoundError):
            await post_service.get_post(post.id)

    async def test_delete_missing_post(self, post_service):
        with pytest.raises(PostNotFoundError):
            await post_service.delete_post(9999)


class TestListPosts:
    async def test_pinned_notices_first(self, post_service):
        pinned = await post_service.create_post(notice_input("고정", is_pinned=True))
        await post_service.create_post(notice_input("최신"))

        posts, total = await post_service.list_posts(board_type=BoardType.NOTICE)

        assert total == 2
        assert [p.id for p in posts][0] == pinned.id

    async def test_budget_sorted_by_year(self, post_service):
        await post_service.create_post(budget_input("2023", year=2023))
        await post_service.create_post(budget_input("2025", year=2025))
        await post_service.create_post(budget_input("2024", year=2024))

        posts, _ = await post_service.list_posts(board_type=BoardType.BUDGET)
        assert [p.year for p in posts] == [2025, 2024, 2023]

    async def test_filters(self, post_service):
        await post_service.create_post(budget_input("예산", year=2025, budget_type=BudgetType.BUDGET))
        await post_service.create_post(budget_input("결산", year=2024, budget_type=BudgetType.SETTLEMENT))
        await post_service.create_post(notice_input("비공개", is_published=False))
        await post_service.create_post(notice_input("100% 달성"))

        posts, total = await post_service.list_posts(year=2024)
        assert total == 1 and posts[0].title == "결산"

        posts, total = await post_service.list_posts(budget_type=BudgetType.BUDGET)
        assert total == 1 and posts[0].title == "예산"

        # 비공개 글은 목록에 나오지 않는다
        posts, total = await post_service.list_posts(board_type=BoardType.NOTICE)
        assert [p.title for p in posts] == ["100% 달성"]

        # LIKE 와일드카드는 문자 그대로 검색된다
        posts, total = await post_service.list_posts(search="%")
        assert [p.title for p in posts] == ["100% 달성"]

    async def test_pagination(self, post_service):
        for i in range(5):
            await post_service.create_post(notice_input(f"공지 {i}"))

        posts, total = await post_service.list_posts(page=2, limit=2)

        assert total == 5
        assert [p.title for p in posts] == ["공지 2", "공지 1"]
