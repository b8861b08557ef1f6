"""
파일 업로드 관리자
확장자/용량 검사, 파일명 정리, 저장소 업로드와 이미지 썸네일 생성을 담당
"""

import asyncio
import io
import logging
import mimetypes
import re
import time
import unicodedata
import uuid
from pathlib import Path
from typing import List, Optional, Dict, Any

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from app.core.config import Settings
from app.core.exceptions import FileUploadError, StorageError
from app.core.storage import BaseStorage, IMAGES_BUCKET, DOCUMENTS_BUCKET

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class FileUploadManager:
    """파일 업로드 관리자"""

    IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'webp', 'gif'}
    DOCUMENT_EXTENSIONS = {'pdf', 'doc', 'docx', 'xls', 'xlsx', 'zip', 'hwp'}
    ALLOWED_EXTENSIONS = IMAGE_EXTENSIONS | DOCUMENT_EXTENSIONS

    def __init__(
        self,
        storage: BaseStorage,
        max_image_size: int = 10 * MB,
        max_document_size: int = 20 * MB,
        max_files_per_upload: int = 10,
        thumbnail_size: int = 300,
    ):
        self.storage = storage
        self.max_image_size = max_image_size
        self.max_document_size = max_document_size
        self.max_files_per_upload = max_files_per_upload
        self.thumbnail_size = thumbnail_size

    @classmethod
    def from_settings(cls, settings: Settings, storage: BaseStorage) -> "FileUploadManager":
        return cls(
            storage,
            max_image_size=settings.MAX_IMAGE_SIZE,
            max_document_size=settings.MAX_DOCUMENT_SIZE,
            max_files_per_upload=settings.MAX_FILES_PER_UPLOAD,
            thumbnail_size=settings.THUMBNAIL_SIZE,
        )

    async def ensure_upload_dir(self):
        """이미지/문서 버킷 준비"""
        await self.storage.ensure_buckets()

    @staticmethod
    def get_extension(filename: str) -> str:
        return Path(filename).suffix.lower().lstrip('.')

    def max_size_for(self, is_image: bool) -> int:
        return self.max_image_size if is_image else self.max_document_size

    def validate_file(self, filename: Optional[str], size: int) -> Dict[str, Any]:
        """파일 유효성 검사. 문제가 있으면 파일명을 담은 FileUploadError"""
        if not filename:
            raise FileUploadError("파일명이 없습니다.")

        ext = self.get_extension(filename)
        if ext not in self.ALLOWED_EXTENSIONS:
            raise FileUploadError(f"허용되지 않는 파일 형식입니다: .{ext} ({filename})")

        is_image = ext in self.IMAGE_EXTENSIONS
        max_size = self.max_size_for(is_image)
        if size > max_size:
            raise FileUploadError(f"파일 크기가 {max_size // MB}MB를 초과합니다: {filename}")

        return {'filename': filename, 'extension': ext, 'is_image': is_image, 'size': size}

    @staticmethod
    def sanitize_filename(filename: str) -> str:
        """문자/숫자/밑줄/점/하이픈 이외의 문자를 '_' 로 바꾸고 연속된 구분자를 합친다"""
        name = unicodedata.normalize('NFC', Path(filename).name)
        name = re.sub(r'[^\w.\-]', '_', name)
        name = re.sub(r'_+', '_', name)
        name = re.sub(r'\.{2,}', '.', name)
        return name[-150:] or 'file'

    def generate_storage_key(self, filename: str) -> str:
        """고유한 저장 키 생성 (타임스탬프 + 정리된 파일명)"""
        timestamp = int(time.time() * 1000)
        unique_id = uuid.uuid4().hex[:8]
        return f"{timestamp}-{unique_id}-{self.sanitize_filename(filename)}"

    @staticmethod
    def get_upload_size(file: UploadFile) -> int:
        if file.size is not None:
            return file.size
        file.file.seek(0, 2)  # 파일 끝으로 이동
        size = file.file.tell()
        file.file.seek(0)
        return size

    async def save_files(self, files: List[UploadFile]) -> List[Dict[str, Any]]:
        """다중 파일 저장

        모든 파일을 먼저 검사하고, 하나라도 실패하면 아무것도 저장하지 않는다.
        저장 도중 실패하면 이미 저장된 객체를 지우고 StorageError 를 던진다.
        """
        if not files:
            raise FileUploadError("업로드할 파일이 없습니다.")
        if len(files) > self.max_files_per_upload:
            raise FileUploadError(f"최대 {self.max_files_per_upload}개의 파일만 업로드할 수 있습니다.")

        validated = [self.validate_file(file.filename, self.get_upload_size(file)) for file in files]

        pending = []
        for file, info in zip(files, validated):
            data = await file.read()
            # 선언된 크기와 실제 크기가 다를 수 있으므로 다시 검사
            self.validate_file(file.filename, len(data))
            pending.append((file, info, data))

        results = await asyncio.gather(
            *(self._store(file, info, data) for file, info, data in pending),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            stored = [r for r in results if not isinstance(r, BaseException)]
            await self._rollback(stored)
            for failure in failures:
                logger.error(f"File upload failed: {failure!r}")
            raise StorageError()

        logger.info(f"Uploaded {len(results)} file(s)")
        return results

    async def _store(self, file: UploadFile, info: Dict[str, Any], data: bytes) -> Dict[str, Any]:
        is_image = info['is_image']
        bucket = IMAGES_BUCKET if is_image else DOCUMENTS_BUCKET
        key = self.generate_storage_key(file.filename)
        content_type = file.content_type or mimetypes.guess_type(file.filename)[0]

        url = await self.storage.save(bucket, key, data, content_type)
        stored_objects = [(bucket, key)]

        result = {
            'filename': file.filename,
            'url': url,
            'size': len(data),
            'mimetype': content_type,
            'isImage': is_image,
            'thumbnailUrl': None,
            'storageKey': f"{bucket}/{key}",
            '_objects': stored_objects,
        }

        if is_image:
            result['thumbnailUrl'] = url
            try:
                thumbnail = await asyncio.to_thread(self.create_thumbnail, data)
                if thumbnail is not None:
                    thumb_key = f"thumb-{Path(key).stem}.webp"
                    result['thumbnailUrl'] = await self.storage.save(bucket, thumb_key, thumbnail, 'image/webp')
                    stored_objects.append((bucket, thumb_key))
            except Exception:
                await self._rollback([result])
                raise

        return result

    def create_thumbnail(self, data: bytes) -> Optional[bytes]:
        """정사각형 WebP 썸네일 생성. 이미지로 읽을 수 없으면 None"""
        size = (self.thumbnail_size, self.thumbnail_size)
        try:
            with Image.open(io.BytesIO(data)) as img:
                img = img.convert('RGB')
                # 가운데를 기준으로 잘라낸 뒤 축소
                width, height = img.size
                side = min(width, height)
                left = (width - side) // 2
                top = (height - side) // 2
                img = img.crop((left, top, left + side, top + side))
                img.thumbnail(size, Image.Resampling.LANCZOS)
                buffer = io.BytesIO()
                img.save(buffer, 'WEBP', quality=80)
                return buffer.getvalue()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.warning(f"Failed to create thumbnail: {e}")
            return None

    async def _rollback(self, stored: List[Dict[str, Any]]):
        for result in stored:
            for bucket, key in result.get('_objects', []):
                try:
                    await self.storage.delete(bucket, key)
                except OSError as e:
                    logger.error(f"Failed to remove {bucket}/{key} during rollback: {e}")

    @staticmethod
    def public_result(result: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in result.items() if not k.startswith('_')}
