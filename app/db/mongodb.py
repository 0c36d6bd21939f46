"""
MongoDB connection management and index creation
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from app.core.config import config
from app.core.errors import StoreUnavailable
from app.core.logger import logger

LISTINGS = "listings"
AUTHORS = "authors"
REVIEWS = "reviews"


class Database:
    """Database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    database: Optional[AsyncIOMotorDatabase] = None


db = Database()


async def connect_to_mongo():
    """Create database connection and make sure indexes exist"""
    logger.info("Connecting to MongoDB...")

    try:
        db.client = AsyncIOMotorClient(config.mongodb_url)
        db.database = db.client[config.mongodb_database]

        # Test connection
        await db.client.admin.command("ping")

        logger.info(
            f"Successfully connected to MongoDB database '{config.mongodb_database}'",
            metadata={
                "event": "mongodb_connected",
                "database": config.mongodb_database,
                "host": config.mongodb_host,
                "port": config.mongodb_port,
            },
        )
    except PyMongoError as e:
        logger.error(
            "Could not connect to MongoDB",
            error=e,
            metadata={"event": "mongodb_connection_error"},
        )
        raise StoreUnavailable("Could not connect to the database")

    await create_indexes(db.database)


async def close_mongo_connection():
    """Close database connection"""
    logger.info("Closing connection to MongoDB...")
    if db.client is not None:
        db.client.close()
        db.client = None
        db.database = None


async def get_database() -> AsyncIOMotorDatabase:
    """Get database instance"""
    if db.database is None:
        await connect_to_mongo()
    return db.database


async def get_listing_collection():
    database = await get_database()
    return database[LISTINGS]


async def get_author_collection():
    database = await get_database()
    return database[AUTHORS]


async def get_review_collection():
    database = await get_database()
    return database[REVIEWS]


async def create_indexes(database: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the review workflow relies on.

    The unique index on ``authors.handle`` is what turns a racing duplicate
    registration into a Conflict instead of two authors with one handle.
    """
    try:
        await database[AUTHORS].create_index(
            [("handle", ASCENDING)], unique=True, name="idx_handle_unique"
        )
        await database[REVIEWS].create_index(
            [("target_ref", ASCENDING), ("created_at", DESCENDING)],
            name="idx_target_created",
        )
        await database[REVIEWS].create_index(
            [("author_ref", ASCENDING), ("created_at", DESCENDING)],
            name="idx_author_created",
        )
        await database[LISTINGS].create_index(
            [("average_rating", DESCENDING)], name="idx_average_rating"
        )
        await database[LISTINGS].create_index(
            [("created_at", DESCENDING)], name="idx_created"
        )
        logger.info("MongoDB indexes ensured", metadata={"event": "mongodb_indexes_created"})
    except PyMongoError as e:
        logger.error(
            "Failed to create MongoDB indexes",
            error=e,
            metadata={"event": "mongodb_index_error"},
        )
        raise StoreUnavailable("Could not prepare the database")
