"""Formatting helpers shared by the view templates"""

from datetime import datetime
from email.utils import parsedate_to_datetime
from pathlib import PurePosixPath
from typing import Dict, NamedTuple, Optional

from bs4 import BeautifulSoup

DESCRIPTION_LENGTH = 200
SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


class FileTypeInfo(NamedTuple):
    type: str
    icon: str
    color: str


FILE_TYPES: Dict[str, FileTypeInfo] = {}
_EXTENSIONS = {
    ("image", "🖼️", "#10b981"): (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"),
    ("video", "🎥", "#f59e0b"): (".mp4", ".webm", ".mov", ".avi", ".mkv"),
    ("audio", "🎵", "#8b5cf6"): (".mp3", ".wav", ".ogg", ".m4a", ".flac"),
    ("document", "📄", "#ef4444"): (".pdf", ".doc", ".docx", ".txt", ".rtf"),
    ("spreadsheet", "📊", "#06b6d4"): (".xls", ".xlsx", ".csv"),
    ("presentation", "📽️", "#f97316"): (".ppt", ".pptx"),
    ("archive", "📦", "#64748b"): (".zip", ".rar", ".7z", ".tar", ".gz"),
}
for (_type, _icon, _color), _extensions in _EXTENSIONS.items():
    for _extension in _extensions:
        FILE_TYPES[_extension] = FileTypeInfo(_type, _icon, _color)

DEFAULT_FILE_TYPE = FileTypeInfo("default", "📁", "#6b7280")


def file_type_info(filename: str) -> FileTypeInfo:
    """Category, icon and color of a file, by extension"""
    return FILE_TYPES.get(PurePosixPath(filename or "").suffix.lower(), DEFAULT_FILE_TYPE)


def format_file_size(size: Optional[int]) -> str:
    """
    Human-readable size with 1024-based units

    >>> format_file_size(1536)
    '1.5 KB'
    """
    if not size:
        return "0 Bytes"
    index = 0
    while size >= 1024 ** (index + 1) and index < len(SIZE_UNITS) - 1:
        index += 1
    value = round(size / (1024 ** index), 2)
    return f"{value:g} {SIZE_UNITS[index]}"


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 2822 (RSS) or ISO 8601 date string"""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    """Dates like 'Jan 5, 2024, 03:04 PM'; unparseable input is returned as is"""
    parsed = parse_date(value)
    if parsed is None:
        return value or ""
    return f"{parsed:%b} {parsed.day}, {parsed:%Y, %I:%M %p}"


def plain_text(html: Optional[str]) -> str:
    """Strip markup from feed descriptions"""
    if not html:
        return ""
    return " ".join(BeautifulSoup(html, "html.parser").get_text(" ").split())


def truncate(text: Optional[str], length: int = DESCRIPTION_LENGTH) -> str:
    text = text or ""
    if len(text) > length:
        return text[:length] + "..."
    return text
