"""Response envelope shared by every backend endpoint"""

from pydantic import BaseModel, ConfigDict
from typing import Any, Optional


class ApiResponse(BaseModel):
    """
    ``{success, data?, error?}`` envelope

    Unknown top-level keys (``pagination``, ``message``, ...) are kept so that
    endpoint-specific subclasses can declare only what they use.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = True
    data: Optional[Any] = None
    error: Optional[str] = None
    message: Optional[str] = None
