"""
파일 저장소 백엔드
로컬 디스크(aiofiles)와 S3 호환 오브젝트 스토리지(boto3)를 같은 인터페이스로 제공한다.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

logger = logging.getLogger(__name__)

IMAGES_BUCKET = "images"
DOCUMENTS_BUCKET = "documents"
BUCKETS = (IMAGES_BUCKET, DOCUMENTS_BUCKET)


class BaseStorage(ABC):
    @abstractmethod
    async def save(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Saves the object and returns its public URL."""

    @abstractmethod
    async def delete(self, bucket: str, key: str) -> None:
        """Deletes the object from the storage."""

    async def ensure_buckets(self) -> None:
        """Prepares the image/document buckets."""


class LocalStorage(BaseStorage):
    def __init__(self, upload_dir: str, public_base_url: str = "", url_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.url_prefix = url_prefix

    def path_for(self, bucket: str, key: str) -> Path:
        return self.upload_dir / bucket / key

    async def ensure_buckets(self) -> None:
        for bucket in BUCKETS:
            await aiofiles.os.makedirs(self.upload_dir / bucket, exist_ok=True)

    async def save(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        await aiofiles.os.makedirs(self.upload_dir / bucket, exist_ok=True)
        # 같은 키가 이미 있으면 덮어쓰지 않는다
        async with aiofiles.open(self.path_for(bucket, key), "xb") as f:
            await f.write(data)
        return f"{self.public_base_url}{self.url_prefix}/{bucket}/{key}"

    async def delete(self, bucket: str, key: str) -> None:
        path = self.path_for(bucket, key)
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)
        else:
            logger.warning(f"File not found for deletion: {path}")


class S3Storage(BaseStorage):
    """S3 호환 스토리지. 버킷 구분은 키 prefix(images/, documents/)로 한다"""

    def __init__(
        self,
        bucket_name: str,
        region: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client=None,
    ):
        if not bucket_name:
            raise ValueError("S3_BUCKET_NAME is not set.")
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.s3_client = client or boto3.client(
            "s3",
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
            endpoint_url=endpoint_url,
        )

    def object_key(self, bucket: str, key: str) -> str:
        return f"{bucket}/{key}"

    def public_url(self, object_key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{object_key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{object_key}"

    async def save(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        object_key = self.object_key(bucket, key)
        extra_args = {"CacheControl": "max-age=3600"}
        if content_type:
            extra_args["ContentType"] = content_type
        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=object_key,
                Body=data,
                **extra_args,
            )
        except (BotoCoreError, ClientError) as e:
            raise OSError(f"S3 upload failed for {object_key}: {e}") from e
        return self.public_url(object_key)

    async def delete(self, bucket: str, key: str) -> None:
        object_key = self.object_key(bucket, key)
        try:
            await asyncio.to_thread(
                self.s3_client.delete_object, Bucket=self.bucket_name, Key=object_key
            )
        except (BotoCoreError, ClientError) as e:
            raise OSError(f"S3 delete failed for {object_key}: {e}") from e


def create_storage(settings: Settings) -> BaseStorage:
    storage_type = settings.STORAGE_TYPE
    if storage_type == "s3":
        return S3Storage(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            access_key_id=settings.AWS_ACCESS_KEY_ID,
            secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )
    elif storage_type == "local":
        return LocalStorage(settings.UPLOAD_DIR, public_base_url=settings.PUBLIC_BASE_URL)
    else:
        raise ValueError(f"Unknown storage type: {storage_type}")
