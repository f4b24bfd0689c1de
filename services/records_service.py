"""Service layer for single-record database access."""
import logging
from typing import Any, Dict, Optional, Type

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection  # Type hint for collection
from pymongo.errors import PyMongoError

from models.record import Record

logger = logging.getLogger(__name__)


def id_filter(record_id: str) -> Dict[str, Any]:
    """Builds the `_id` query for a record. A 24-hex id matches either an ObjectId key or the same string key."""
    if ObjectId.is_valid(record_id):
        return {"_id": {"$in": [ObjectId(record_id), record_id]}}
    return {"_id": record_id}


def document_to_record(doc: Dict[str, Any], model: Type[Record]) -> Record:
    """Converts a raw MongoDB document into the record model, exposing `_id` as `id`."""
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return model(**doc)


async def find_record(collection: AsyncIOMotorCollection, record_id: str, model: Type[Record]) -> Optional[Record]:
    """Fetches exactly one record by identifier, or None when it does not exist."""
    logger.debug(f"Looking up '{record_id}' in collection '{collection.name}'")
    try:
        doc = await collection.find_one(id_filter(record_id))
    except PyMongoError as e:
        logger.error(f"Database error fetching '{record_id}': {e}")
        raise ConnectionError(f"Database error fetching record: {e}")
    if doc is None:
        return None
    return document_to_record(doc, model)


async def update_record(collection: AsyncIOMotorCollection, record_id: str, changes: Dict[str, Any]) -> bool:
    """Overwrites the given fields of one record. Returns False when no record matched."""
    logger.info(f"Updating '{record_id}' in collection '{collection.name}' with fields {sorted(changes)}")
    try:
        result = await collection.update_one(id_filter(record_id), {"$set": changes})
    except PyMongoError as e:
        logger.error(f"Database error updating '{record_id}': {e}")
        raise ConnectionError(f"Database error updating record: {e}")
    return result.matched_count > 0


async def delete_record(collection: AsyncIOMotorCollection, record_id: str) -> bool:
    """Deletes one record. Returns False when there was nothing to delete."""
    logger.info(f"Deleting '{record_id}' from collection '{collection.name}'")
    try:
        result = await collection.delete_one(id_filter(record_id))
    except PyMongoError as e:
        logger.error(f"Database error deleting '{record_id}': {e}")
        raise ConnectionError(f"Database error deleting record: {e}")
    return result.deleted_count > 0
