"""HTML view renderers"""

from .renderer import ViewRenderer
from .formatting import file_type_info, format_date, format_file_size

__all__ = [
    "ViewRenderer",
    "file_type_info",
    "format_date",
    "format_file_size",
]
