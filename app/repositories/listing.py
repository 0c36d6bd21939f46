"""
Listing repository
"""

from app.models.listing import Listing
from app.repositories.mongo import MongoRepository


class ListingRepository(MongoRepository[Listing]):
    """Yarn listings; every update bumps ``version`` for compare-and-swap"""

    model = Listing
    label = "listing"
    versioned = True
