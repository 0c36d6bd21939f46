"""
Authenticated principal model
"""

from typing import Optional
from pydantic import BaseModel


class User(BaseModel):
    """Identity extracted from a verified access token"""

    id: str
    handle: Optional[str] = None
