# course_service/database.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from course_service import config
from course_service.errors import StoreError

logger = logging.getLogger("course_service.database")


class Database:
    """Process-wide MongoDB handle, opened on startup and closed on shutdown."""

    def __init__(self, uri: str, name: str):
        self.uri = uri
        self.name = name
        self.client: Optional[AsyncIOMotorClient] = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    def connect(self) -> None:
        if self.client is not None:
            return
        self.client = AsyncIOMotorClient(self.uri)
        logger.info(f"MongoDB client created for database '{self.name}'")

    def close(self) -> None:
        if self.client is None:
            return
        self.client.close()
        self.client = None
        logger.info("MongoDB connection closed")

    def get_db(self) -> AsyncIOMotorDatabase:
        if self.client is None:
            raise StoreError(error="Database is not connected")
        return self.client[self.name]


database = Database(config.MONGO_URI, config.MONGO_DB_NAME)
