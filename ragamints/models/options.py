"""Recent media iteration options."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Option fields forwarded to the listing endpoint
LISTING_FIELDS = ("count", "min_id", "max_id", "min_timestamp", "max_timestamp")


class RecentMediaOptions(BaseModel):
    """Options for fetching and iterating over a user's recent media.

    count, min_id, max_id, min_timestamp and max_timestamp bound the listing;
    sequential and include_videos only affect iteration.
    """

    count: int | None = Field(default=None, gt=0)
    min_id: str | None = None
    max_id: str | None = None
    min_timestamp: int | None = Field(default=None, ge=0)
    max_timestamp: int | None = Field(default=None, ge=0)
    sequential: bool = False
    include_videos: bool = False

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def listing_params(self) -> dict[str, Any]:
        """Listing parameters that were actually supplied."""
        return {
            name: getattr(self, name) for name in LISTING_FIELDS if getattr(self, name) is not None
        }

    @property
    def has_bounds(self) -> bool:
        """Whether any count or filter was supplied."""
        return bool(self.listing_params())
