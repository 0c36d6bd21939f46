"""
Database module initialization
"""

from .mongodb import (
    db,
    connect_to_mongo,
    close_mongo_connection,
    get_database,
    get_listing_collection,
    get_author_collection,
    get_review_collection,
)

__all__ = [
    "db",
    "connect_to_mongo",
    "close_mongo_connection",
    "get_database",
    "get_listing_collection",
    "get_author_collection",
    "get_review_collection",
]
