from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal, Union, Dict, Any, Annotated
from datetime import datetime

from app.models.board import BoardType, BudgetType, TITLE_MAX_LENGTH


class AttachmentInput(BaseModel):
    """업로드 API가 돌려준 파일 정보를 게시글에 연결할 때 사용"""
    model_config = ConfigDict(populate_by_name=True)

    filename_original: str = Field(..., min_length=1, max_length=255, alias="filenameOriginal")
    file_url: str = Field(..., min_length=1, max_length=1000, alias="fileUrl")
    file_size: int = Field(0, ge=0, alias="fileSize")
    is_image: bool = Field(False, alias="isImage")
    mime_type: Optional[str] = Field(None, max_length=100, alias="mimeType")


class PostBase(BaseModel):
    """모든 게시판이 공유하는 필드"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: Optional[str] = None
    is_published: bool = Field(True, alias="isPublished")
    attachments: List[AttachmentInput] = []

    def board_columns(self) -> Dict[str, Any]:
        """게시판 전용 컬럼 값. 해당 게시판과 무관한 컬럼은 포함하지 않는다"""
        return {}


class NoticePostInput(PostBase):
    board_type: Literal["NOTICE"] = Field(alias="boardType")
    is_pinned: bool = Field(False, alias="isPinned")

    def board_columns(self) -> Dict[str, Any]:
        return {"is_pinned": self.is_pinned}


class BudgetPostInput(PostBase):
    board_type: Literal["BUDGET"] = Field(alias="boardType")
    year: Optional[int] = Field(None, ge=1900, le=2999)
    budget_type: Optional[BudgetType] = Field(None, alias="budgetType")

    def board_columns(self) -> Dict[str, Any]:
        return {"year": self.year, "budget_type": self.budget_type}


class ResourcePostInput(PostBase):
    board_type: Literal["RESOURCE"] = Field(alias="boardType")


class GalleryPostInput(PostBase):
    board_type: Literal["GALLERY"] = Field(alias="boardType")
    thumbnail_url: Optional[str] = Field(None, max_length=1000, alias="thumbnailUrl")

    def board_columns(self) -> Dict[str, Any]:
        return {"thumbnail_url": self.thumbnail_url}


# boardType 으로 구분되는 게시글 입력. 다른 게시판의 필드는 모델에 존재하지 않는다.
PostInput = Annotated[
    Union[NoticePostInput, BudgetPostInput, ResourcePostInput, GalleryPostInput],
    Field(discriminator="board_type"),
]


class AttachmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    post_id: int = Field(alias="postId")
    filename_original: str = Field(alias="filenameOriginal")
    file_url: str = Field(alias="fileUrl")
    file_size: int = Field(alias="fileSize")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    is_image: bool = Field(alias="isImage")
    display_order: int = Field(alias="displayOrder")


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    board_type: BoardType = Field(alias="boardType")
    title: str
    content: Optional[str] = None
    is_published: bool = Field(alias="isPublished")
    views: int
    is_pinned: Optional[bool] = Field(None, alias="isPinned")
    year: Optional[int] = None
    budget_type: Optional[BudgetType] = Field(None, alias="budgetType")
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    attachments: List[AttachmentResponse] = []


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)


class PostListResponse(BaseModel):
    posts: List[PostResponse]
    pagination: Pagination


class DeleteResponse(BaseModel):
    success: bool = True
