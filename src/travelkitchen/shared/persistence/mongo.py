from __future__ import annotations

import time
import uuid
from typing import Optional

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import OperationFailure
from travelkitchen.shared.config.settings import settings

RECIPES = "recipes"
IDEA_SESSIONS = "recipe_idea_sessions"
IDEAS = "recipe_ideas"

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        _client = MongoClient(settings.MONGODB_URI)
    return _client


def get_db() -> Database:
    global _db
    if _db is None:
        _db = get_client()[settings.MONGODB_DB]
    return _db


def set_db(db: Optional[Database]) -> None:
    """Swap the process-wide database handle (tests inject an in-memory one)."""
    global _db
    _db = db


def now_ms() -> float:
    return time.time() * 1000


def new_id() -> str:
    return uuid.uuid4().hex


def ensure_indexes() -> None:
    """Create indexes for collections if they do not exist."""
    db = get_db()
    recipes = db.get_collection(RECIPES)
    sessions = db.get_collection(IDEA_SESSIONS)
    ideas = db.get_collection(IDEAS)
    try:
        if "by_user" not in recipes.index_information():
            recipes.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)], name="by_user")
        if "by_published" not in recipes.index_information():
            recipes.create_index([("isPublished", ASCENDING), ("createdAt", DESCENDING)], name="by_published")
        if "by_user" not in sessions.index_information():
            sessions.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)], name="by_user")
        if "by_session" not in ideas.index_information():
            ideas.create_index(
                [("sessionId", ASCENDING), ("createdAt", DESCENDING), ("position", ASCENDING)], name="by_session"
            )
        if "by_user" not in ideas.index_information():
            ideas.create_index([("userId", ASCENDING)], name="by_user")
    except OperationFailure:
        pass
