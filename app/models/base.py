"""
Shared pieces of the persisted document models
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """A document stored in one of the service collections"""

    model_config = ConfigDict(populate_by_name=True)

    # Assigned by the store at insert time
    id: Optional[str] = None
