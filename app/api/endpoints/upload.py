"""
파일 업로드 엔드포인트
"""

from fastapi import APIRouter, File, UploadFile, Depends
from typing import List

from app.api.deps import get_current_admin, get_file_manager
from app.core.file_upload import FileUploadManager
from app.schemas.auth import AdminIdentity
from app.schemas.upload import UploadResponse

router = APIRouter()


@router.post("", response_model=UploadResponse)
async def upload_files(
    files: List[UploadFile] = File(...),
    admin: AdminIdentity = Depends(get_current_admin),
    file_manager: FileUploadManager = Depends(get_file_manager),
):
    """
    다중 파일 업로드 (관리자 전용)

    - **files**: 업로드할 파일들 (이미지 10MB, 문서 20MB 이하)
    - 한 파일이라도 실패하면 전체 요청이 실패한다
    """
    results = await file_manager.save_files(files)
    return UploadResponse(files=[file_manager.public_result(r) for r in results])
