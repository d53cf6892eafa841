import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from mentorhub.core.config import MONGODB_URL, DATABASE_NAME

logger = logging.getLogger(__name__)


class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

mongodb = MongoDB()

async def connect_to_mongo():
    mongodb.client = AsyncIOMotorClient(MONGODB_URL, tz_aware=True)
    mongodb.db = mongodb.client[DATABASE_NAME]

    # Test connection
    await mongodb.client.admin.command("ping")
    logger.info("MongoDB connected to %s", DATABASE_NAME)

    await ensure_indexes()

async def close_mongo_connection():
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("MongoDB disconnected")

async def ensure_indexes():
    await mongodb.db.users.create_index("id", unique=True)
    await mongodb.db.users.create_index("email", unique=True)
    await mongodb.db.users.create_index("verification_token", sparse=True)

    await mongodb.db.sessions.create_index("id", unique=True)
    await mongodb.db.sessions.create_index(
        [("mentor_id", ASCENDING), ("date", ASCENDING), ("start_time", ASCENDING)]
    )
    await mongodb.db.sessions.create_index("mentee_id")
    # Mongo drops expired holds on its own; confirmed sessions have no expiry field
    await mongodb.db.sessions.create_index("reservation_expires", expireAfterSeconds=0)
    logger.info("MongoDB indexes ensured")
