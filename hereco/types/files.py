"""Type definitions for the file gallery API"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from .envelope import ApiResponse


class FileItem(BaseModel):
    """A blob in the gallery container"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    size: int = 0
    content_type: Optional[str] = Field(None, alias="contentType")
    last_modified: Optional[str] = Field(None, alias="lastModified")
    url: Optional[str] = None


class Pagination(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    page: Optional[int] = None
    total: Optional[int] = None
    has_more: bool = Field(False, alias="hasMore")


class FileListResponse(ApiResponse):
    data: List[FileItem] = Field(default_factory=list)
    pagination: Optional[Pagination] = None


class FileInfoResponse(ApiResponse):
    data: Optional[FileItem] = None


class DownloadUrl(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    download_url: str = Field(..., alias="downloadUrl")
    expires_at: Optional[str] = Field(None, alias="expiresAt")


class DownloadUrlResponse(ApiResponse):
    data: Optional[DownloadUrl] = None
