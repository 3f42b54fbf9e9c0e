"""DTOs for time-limited object access."""

from datetime import datetime

from pydantic import BaseModel, Field


class AccessGrant(BaseModel):
    """A pre-signed read URL for one stored object."""

    url: str = Field(description="Pre-signed GET URL")
    key: str = Field(description="Object key the URL grants access to")
    expires_in_seconds: int = Field(gt=0, description="Lifetime of the URL")
    expires_at: datetime = Field(description="When the URL stops working")
