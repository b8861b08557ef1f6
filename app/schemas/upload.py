from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional


class UploadedFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str
    url: str
    size: int
    mimetype: Optional[str] = None
    is_image: bool = Field(alias="isImage")
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    storage_key: str = Field(alias="storageKey")


class UploadResponse(BaseModel):
    success: bool = True
    files: List[UploadedFile]
