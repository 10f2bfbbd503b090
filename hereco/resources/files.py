"""Files resource implementation"""

from typing import Any, TYPE_CHECKING
from urllib.parse import quote

from .._cache import ResponseCache
from ..types.files import FileListResponse, FileInfoResponse, DownloadUrlResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient


def _file_path(filename: str) -> str:
    if not filename:
        raise ValueError("filename is required")
    return f"/api/files/{quote(filename, safe='')}"


class FilesResource:
    """Synchronous Files resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def list(self, **options: Any) -> FileListResponse:
        """
        List gallery files.

        Args:
            **options: Query parameters (page, limit, search, type, sort)

        Returns:
            FileListResponse: Files with pagination info
        """
        key = ResponseCache.make_key("files", options)
        cached = self._client.response_cache.get(key)
        if cached is not None:
            return cached

        response = self._client.request("GET", "/api/files", params=options)
        result = FileListResponse(**response.json())
        self._client.response_cache.set(key, result)
        return result

    def info(self, filename: str) -> FileInfoResponse:
        """
        Get metadata of a single file.

        Args:
            filename: Blob name

        Returns:
            FileInfoResponse: File metadata

        Raises:
            ValueError: If filename is empty
            NotFoundError: File not found
        """
        path = _file_path(filename)
        key = ResponseCache.make_key("file_info", {"filename": filename})
        cached = self._client.response_cache.get(key)
        if cached is not None:
            return cached

        response = self._client.request("GET", path)
        result = FileInfoResponse(**response.json())
        self._client.response_cache.set(key, result)
        return result

    def download_url(self, filename: str, expiry_minutes: int = 60) -> DownloadUrlResponse:
        """
        Get a time-limited download URL. Never cached.

        Args:
            filename: Blob name
            expiry_minutes: Lifetime of the signed URL (default: 60)

        Returns:
            DownloadUrlResponse: Signed URL and its expiry
        """
        path = f"{_file_path(filename)}/download"
        response = self._client.request("GET", path, params={"expiry": expiry_minutes})
        return DownloadUrlResponse(**response.json())

    def search(self, query: str, **options: Any) -> FileListResponse:
        return self.list(**{**options, "search": query})

    def filter_by_type(self, file_type: str, **options: Any) -> FileListResponse:
        return self.list(**{**options, "type": file_type})

    def sort(self, sort_by: str, **options: Any) -> FileListResponse:
        return self.list(**{**options, "sort": sort_by})

    def page(self, page: int = 1, limit: int = 12, **options: Any) -> FileListResponse:
        return self.list(**{**options, "page": page, "limit": limit})


class AsyncFilesResource:
    """Asynchronous Files resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def list(self, **options: Any) -> FileListResponse:
        """List gallery files (cached per query)"""
        key = ResponseCache.make_key("files", options)
        cached = self._client.response_cache.get(key)
        if cached is not None:
            return cached

        response = await self._client.request("GET", "/api/files", params=options)
        result = FileListResponse(**response.json())
        self._client.response_cache.set(key, result)
        return result

    async def info(self, filename: str) -> FileInfoResponse:
        """Get metadata of a single file (cached)"""
        path = _file_path(filename)
        key = ResponseCache.make_key("file_info", {"filename": filename})
        cached = self._client.response_cache.get(key)
        if cached is not None:
            return cached

        response = await self._client.request("GET", path)
        result = FileInfoResponse(**response.json())
        self._client.response_cache.set(key, result)
        return result

    async def download_url(self, filename: str, expiry_minutes: int = 60) -> DownloadUrlResponse:
        """Get a time-limited download URL"""
        path = f"{_file_path(filename)}/download"
        response = await self._client.request("GET", path, params={"expiry": expiry_minutes})
        return DownloadUrlResponse(**response.json())

    async def search(self, query: str, **options: Any) -> FileListResponse:
        return await self.list(**{**options, "search": query})

    async def filter_by_type(self, file_type: str, **options: Any) -> FileListResponse:
        return await self.list(**{**options, "type": file_type})

    async def sort(self, sort_by: str, **options: Any) -> FileListResponse:
        return await self.list(**{**options, "sort": sort_by})

    async def page(self, page: int = 1, limit: int = 12, **options: Any) -> FileListResponse:
        return await self.list(**{**options, "page": page, "limit": limit})
