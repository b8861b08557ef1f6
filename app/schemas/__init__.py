# Pydantic 스키마들을 여기서 import
from .auth import LoginRequest, LoginResponse, AdminIdentity, MeResponse
from .post import (
    AttachmentInput, PostInput, NoticePostInput, BudgetPostInput, ResourcePostInput, GalleryPostInput,
    PostResponse, PostListResponse, Pagination, DeleteResponse,
)
from .upload import UploadedFile, UploadResponse
