"""
Store operations for the profile and visitor counter documents.

Every function takes the collection explicitly. Store errors
(pymongo.errors.PyMongoError) are left to the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pymongo import ReturnDocument
from pymongo.collection import Collection

from schemas import COUNTER_TYPE, DEFAULT_PROFILE, PROFILE_TYPE, Profile, Project

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "title", "location", "email", "bio", "skills")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_indexes(collection: Collection) -> None:
    # One document per type; concurrent upserts on the same type then collapse
    collection.create_index("type", unique=True)


def init_profile(collection: Collection) -> bool:
    """Seed the default profile unless one already exists.

    A single upsert keyed on the discriminator, so running it again (or from
    two processes at once) never produces a second profile document.
    """
    ensure_indexes(collection)
    now = _now()
    seed = Profile(**DEFAULT_PROFILE, createdAt=now, updatedAt=now).model_dump()
    seed.pop("type")
    res = collection.update_one(
        {"type": PROFILE_TYPE},
        {"$setOnInsert": seed},
        upsert=True,
    )
    created = res.upserted_id is not None
    if created:
        logger.info("Seeded default profile document")
    return created


def get_portfolio(collection: Collection) -> Optional[dict]:
    doc = collection.find_one({"type": PROFILE_TYPE})
    if doc is None:
        return None
    # ObjectId is not JSON serializable
    doc["_id"] = str(doc["_id"])
    return doc


def update_profile(collection: Collection, fields: dict) -> Optional[datetime]:
    """Partial update of the profile scalar/array fields.

    Only keys in PROFILE_FIELDS are written. Returns the new updatedAt, or
    None when no profile document matched.
    """
    updates = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
    updated_at = _now()
    updates["updatedAt"] = updated_at
    res = collection.update_one({"type": PROFILE_TYPE}, {"$set": updates})
    if res.matched_count == 0:
        return None
    return updated_at


def add_project(collection: Collection, name: str, description: str = "") -> Project:
    project = Project(id=str(uuid4()), name=name, description=description, createdAt=_now())
    res = collection.update_one(
        {"type": PROFILE_TYPE},
        {
            "$push": {"projects": project.model_dump()},
            "$set": {"updatedAt": project.createdAt},
        },
    )
    if res.matched_count == 0:
        logger.warning("Project %s added but no profile document matched", project.id)
    return project


def increment_visitor_count(collection: Collection) -> int:
    doc = collection.find_one_and_update(
        {"type": COUNTER_TYPE},
        {"$inc": {"count": 1}, "$set": {"lastVisit": _now()}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return int(doc["count"])


def check_health(collection: Collection) -> None:
    """Trivial read; raises the driver's error when the store is unreachable."""
    collection.find_one({}, {"_id": 1})
