from typing import Optional

from pydantic import BaseModel, ConfigDict


class DestinationQuery(BaseModel):
    """A place to look up videos for, as named in an itinerary."""

    name: str
    country: str
    activity: Optional[str] = None

    model_config = ConfigDict(frozen=True)
