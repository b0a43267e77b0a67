# richter/database.py
import logging

import certifi
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from richter.core.config import Settings
from richter.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def connect(settings: Settings) -> AsyncIOMotorClient:
    timeout_ms = int(settings.UPSTREAM_TIMEOUT_SECONDS * 1000)
    kwargs = {
        "serverSelectionTimeoutMS": timeout_ms,
        "socketTimeoutMS": timeout_ms,
        "connectTimeoutMS": timeout_ms,
    }
    if settings.MONGO_URL.startswith("mongodb+srv://"):
        kwargs["tlsCAFile"] = certifi.where()
    return AsyncIOMotorClient(settings.MONGO_URL, **kwargs)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    # Uniqueness of email is enforced here, not by the register check.
    await db["users"].create_index([("email", ASCENDING)], unique=True)
    await db["users"].create_index([("verificationCode", ASCENDING)], unique=True, sparse=True)
    await db["carts"].create_index([("email", ASCENDING)])
    await db["payments"].create_index([("email", ASCENDING)])
    logger.info("MongoDB indexes ensured")


def object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"invalid id: {value}")


def id_query(value: str) -> dict:
    """Match documents keyed by a seeded string id or by an ObjectId."""
    if ObjectId.is_valid(value):
        return {"_id": {"$in": [value, ObjectId(value)]}}
    return {"_id": value}


def serialize(doc):
    if doc is None:
        return None
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    return out
