"""Episode model for scraped episode data."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EpisodeModel(BaseModel):
    """Pydantic model for one episode page scraped from the lineup site.

    Field order is the CSV column order.
    """

    model_config = ConfigDict(frozen=True)

    year: int = Field(default=0, description="Catalog year of the series")
    episode_number: str = Field(..., description="Episode number (digits only)")
    subtitle: str = Field(default="", description="Episode title without brackets")
    broadcast_datetime: str = Field(..., description="Broadcast date with fixed time suffix")
    script: str = Field(..., description="脚本")
    storyboard: str = Field(default="", description="絵コンテ (empty for some series)")
    direction: str = Field(..., description="演出")
    animation_direction: str = Field(..., description="作画監督")
    art: str = Field(..., description="美術")


class PageResult(BaseModel):
    """Outcome of scraping a single episode page."""

    url: str = Field(..., description="Episode page URL")
    episode: Optional[EpisodeModel] = Field(default=None, description="Extracted episode on success")
    error: Optional[str] = Field(default=None, description="Failure reason")

    @classmethod
    def success(cls, url: str, episode: EpisodeModel) -> "PageResult":
        return cls(url=url, episode=episode)

    @classmethod
    def failure(cls, url: str, error: str) -> "PageResult":
        return cls(url=url, error=error)

    @property
    def ok(self) -> bool:
        """Whether the page yielded an episode."""
        return self.episode is not None
