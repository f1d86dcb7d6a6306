"""
MongoDB connection manager.
Owns the single async client shared by every repository.
"""

import structlog
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from ..core.exceptions import ConfigurationError, DatabaseError

logger = structlog.get_logger()

# Collection names used across the service
USERS_COLLECTION = "users"
TRANSACTIONS_COLLECTION = "transactions"
STYLES_COLLECTION = "styles"
ENHANCE_STYLES_COLLECTION = "enhance_styles"
GENERATED_IMAGES_COLLECTION = "generated_images"


def parse_database_name(mongodb_url: str) -> str:
    """
    Extract the database name from a MongoDB URL.

    Raises:
        ConfigurationError: If the URL carries no usable database name
    """
    database_name = mongodb_url.rstrip("/").split("/")[-1].split("?")[0]

    if not database_name or any(char in database_name for char in "&=:@"):
        raise ConfigurationError(
            "MONGODB_URL must end with a database name: mongodb://host/dbname?params",
            parsed_db_name=database_name,
        )
    return database_name


class MongoDB:
    """MongoDB connection manager with async support."""

    def __init__(self) -> None:
        self.client: AsyncIOMotorClient | None = None
        self.database: AsyncIOMotorDatabase | None = None

    async def connect(self, mongodb_url: str) -> None:
        """Establish connection to MongoDB and verify it with a ping."""
        database_name = parse_database_name(mongodb_url)

        try:
            self.client = AsyncIOMotorClient(mongodb_url)
            self.database = self.client[database_name]
            await self.client.admin.command("ping")
        except Exception as e:
            logger.error(
                "Failed to connect to MongoDB",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError(
                f"MongoDB connection failed: {e}",
                original_error=type(e).__name__,
            ) from e

        logger.info("MongoDB connection established", database=database_name)

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

    async def health_check(self) -> dict[str, bool | str]:
        """Check MongoDB connection health."""
        if not self.client:
            return {"connected": False, "error": "No client connection"}

        try:
            await self.client.admin.command("ping")
        except Exception as e:
            logger.error("MongoDB health check failed", error=str(e))
            return {"connected": False, "error": str(e)}

        return {
            "connected": True,
            "database": self.database.name if self.database is not None else "unknown",
        }

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """Get a MongoDB collection."""
        if self.database is None:
            raise DatabaseError(
                "Cannot get collection: database connection not established",
                collection_name=collection_name,
            )
        return self.database[collection_name]
