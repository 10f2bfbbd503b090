"""Type definitions for the podcast API"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from .envelope import ApiResponse


class Enclosure(BaseModel):
    """Audio attachment of an episode"""

    model_config = ConfigDict(extra="allow")

    url: str
    type: Optional[str] = None
    length: Optional[int] = None


class Episode(BaseModel):
    """Single podcast episode as parsed from the RSS feed"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str = ""
    description: Optional[str] = None
    summary: Optional[str] = None
    link: Optional[str] = None
    pub_date: Optional[str] = Field(None, alias="pubDate")
    duration: Optional[str] = None
    image: Optional[str] = None
    enclosure: Optional[Enclosure] = None

    @property
    def text(self) -> str:
        """Description, falling back to the summary"""
        return self.description or self.summary or ""


class EpisodeListResponse(ApiResponse):
    data: List[Episode] = Field(default_factory=list)


class FeedInfo(BaseModel):
    """Channel-level metadata of the podcast feed"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    image: Optional[str] = None
    last_build_date: Optional[str] = Field(None, alias="lastBuildDate")


class FeedInfoResponse(ApiResponse):
    data: Optional[FeedInfo] = None
