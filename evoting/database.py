# evoting/database.py
import logging
from typing import Optional

import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from .config import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION_NAME = "users"
CANDIDATES_COLLECTION_NAME = "candidates"


class MongoConnector:
    """Owns the process-wide motor client and its bounded connection pool."""

    def __init__(self, settings: Settings, client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None):
        self.settings = settings
        if client is None:
            client = motor.motor_asyncio.AsyncIOMotorClient(
                settings.mongo_uri,
                maxPoolSize=settings.mongo_max_pool_size,
                serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
                socketTimeoutMS=settings.mongo_socket_timeout_ms,
            )
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.users_collection = self.db[USERS_COLLECTION_NAME]
        self.candidates_collection = self.db[CANDIDATES_COLLECTION_NAME]

    async def ensure_indexes(self):
        users = self.users_collection
        await users.create_index("nationalId", unique=True)
        await users.create_index("email", unique=True)
        await users.create_index("mobile", unique=True)
        # at most one admin, enforced by the server even under concurrent signups
        await users.create_index(
            "role",
            name="single_admin",
            unique=True,
            partialFilterExpression={"role": "admin"},
        )
        await users.create_index("hasVoted")

        candidates = self.candidates_collection
        await candidates.create_index("name")
        await candidates.create_index("party")
        await candidates.create_index([("voteCount", DESCENDING)])
        await candidates.create_index([("votes.user", ASCENDING)])
        await candidates.create_index([("votes.votedAt", DESCENDING)])
        logger.info(f"Indexes ensured on database: {self.settings.mongo_db}")

    async def ping(self) -> bool:
        await self.client.admin.command("ping")
        return True

    def close(self):
        self.client.close()
        logger.info("MongoDB connection closed")
