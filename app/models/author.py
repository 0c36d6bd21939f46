"""
Author (registered user) document
"""

from datetime import datetime
from typing import List

from pydantic import Field

from app.models.base import Document, utc_now


class Author(Document):
    """A registered user; ``credential`` is a salted hash, never returned"""

    handle: str
    credential: str
    review_refs: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
