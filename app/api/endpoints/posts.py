"""
게시판 API 엔드포인트
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from app.api.deps import get_current_admin, get_post_service
from app.models import BoardType, BudgetType
from app.schemas.auth import AdminIdentity
from app.schemas.post import PostInput, PostResponse, PostListResponse, Pagination, DeleteResponse
from app.services.post_service import PostService, total_pages

router = APIRouter()


@router.get("", response_model=PostListResponse)
async def list_posts(
    board_type: Optional[BoardType] = Query(None, alias="boardType"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    year: Optional[int] = Query(None),
    budget_type: Optional[BudgetType] = Query(None, alias="budgetType"),
    service: PostService = Depends(get_post_service),
):
    """
    게시글 목록 조회
    - 공개된 게시글만 반환
    - 공지사항은 고정 공지 우선, 예산/결산은 연도 내림차순
    """
    posts, total = await service.list_posts(
        board_type=board_type,
        search=search or None,
        year=year,
        budget_type=budget_type,
        page=page,
        limit=limit,
    )

    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=total_pages(total, limit)),
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, service: PostService = Depends(get_post_service)):
    """게시글 상세 조회 (조회수 증가)"""
    return await service.get_post(post_id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostInput,
    admin: AdminIdentity = Depends(get_current_admin),
    service: PostService = Depends(get_post_service),
):
    """게시글 생성 (관리자 전용)"""
    return await service.create_post(data)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    data: PostInput,
    admin: AdminIdentity = Depends(get_current_admin),
    service: PostService = Depends(get_post_service),
):
    """게시글 수정 (관리자 전용, 첨부파일 전체 교체)"""
    return await service.update_post(post_id, data)


@router.delete("/{post_id}", response_model=DeleteResponse)
async def delete_post(
    post_id: int,
    admin: AdminIdentity = Depends(get_current_admin),
    service: PostService = Depends(get_post_service),
):
    """게시글 삭제 (관리자 전용, 첨부파일 함께 삭제)"""
    await service.delete_post(post_id)
    return DeleteResponse(success=True)
