from functools import lru_cache

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from formcraft.config import settings


@lru_cache(maxsize=1)
def get_client() -> AsyncIOMotorClient:
    # Motor connects lazily, so building the client does no I/O.
    return AsyncIOMotorClient(settings.MONGO_URI)


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[settings.DB_NAME]


def forms_collection():
    return get_database().forms


def submissions_collection():
    return get_database().submissions


def convert_objectid_to_str(doc: dict) -> dict:
    """Convert MongoDB ObjectId fields to strings for JSON serialization."""
    if doc is None:
        return doc

    if isinstance(doc, dict):
        result = {}
        for key, value in doc.items():
            if isinstance(value, ObjectId):
                result[key] = str(value)
            elif isinstance(value, dict):
                result[key] = convert_objectid_to_str(value)
            elif isinstance(value, list):
                result[key] = [
                    convert_objectid_to_str(item) if isinstance(item, dict)
                    else (str(item) if isinstance(item, ObjectId) else item)
                    for item in value
                ]
            else:
                result[key] = value
        return result
    return doc
