from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pymongo import ASCENDING, DESCENDING

from travelkitchen.features.ideas.api.schemas import FullRecipe, SessionInputs, StoredIdea
from travelkitchen.shared.persistence import mongo
from travelkitchen.shared.persistence.errors import NotFoundError

log = logging.getLogger("ideas")


def _sessions():
    return mongo.get_db().get_collection(mongo.IDEA_SESSIONS)


def _ideas():
    return mongo.get_db().get_collection(mongo.IDEAS)


def _owned_session(user_id: str, session_id: str) -> Dict[str, Any]:
    session = _sessions().find_one({"_id": session_id})
    if not session or session.get("userId") != user_id:
        raise NotFoundError("Session not found")
    return session


def _delete_session_ideas(session_id: str) -> int:
    # one delete per idea, mirroring how the ideas were added
    count = 0
    for idea in list(_ideas().find({"sessionId": session_id}, {"_id": 1})):
        _ideas().delete_one({"_id": idea["_id"]})
        count += 1
    return count


def get_active_session(user_id: str) -> Optional[Dict[str, Any]]:
    """The user's most recently created session, if any."""
    cur = _sessions().find({"userId": user_id}).sort("createdAt", DESCENDING).limit(1)
    return next(iter(cur), None)


def get_session(user_id: str, session_id: str) -> Dict[str, Any]:
    return _owned_session(user_id, session_id)


def get_session_ideas(user_id: str, session_id: str) -> List[Dict[str, Any]]:
    _owned_session(user_id, session_id)
    # newest batch first; within a batch, the order the model produced
    return list(_ideas().find({"sessionId": session_id}).sort([("createdAt", DESCENDING), ("position", ASCENDING)]))


def create_session(user_id: str, inputs: SessionInputs) -> str:
    now = mongo.now_ms()
    doc = {
        "_id": mongo.new_id(),
        "userId": user_id,
        "inputs": inputs.model_dump(by_alias=True, exclude_none=True),
        "createdAt": now,
        "updatedAt": now,
    }
    _sessions().insert_one(doc)
    return doc["_id"]


def add_ideas(user_id: str, session_id: str, ideas: Sequence[StoredIdea]) -> List[str]:
    _owned_session(user_id, session_id)
    now = mongo.now_ms()
    ids: List[str] = []
    for position, idea in enumerate(ideas):
        doc = idea.model_dump(by_alias=True)
        doc.update({
            "_id": mongo.new_id(),
            "sessionId": session_id,
            "userId": user_id,
            "createdAt": now,
            "position": position,
        })
        _ideas().insert_one(doc)
        ids.append(doc["_id"])
    _sessions().update_one({"_id": session_id}, {"$set": {"updatedAt": now}})
    log.info("added %d ideas to session %s", len(ids), session_id)
    return ids


def get_idea(user_id: str, idea_id: str) -> Optional[Dict[str, Any]]:
    idea = _ideas().find_one({"_id": idea_id})
    if not idea or idea.get("userId") != user_id:
        return None
    return idea


def update_idea_with_full_recipe(user_id: str, idea_id: str, full_recipe: FullRecipe) -> str:
    if get_idea(user_id, idea_id) is None:
        raise NotFoundError("Idea not found")
    _ideas().update_one(
        {"_id": idea_id},
        {"$set": {"fullRecipe": full_recipe.model_dump(by_alias=True)}},
    )
    return idea_id


def delete_session(user_id: str, session_id: str) -> None:
    """Delete every idea of the session, then the session itself."""
    _owned_session(user_id, session_id)
    removed = _delete_session_ideas(session_id)
    _sessions().delete_one({"_id": session_id})
    log.info("deleted session %s (%d ideas)", session_id, removed)


def clear_session(user_id: str, session_id: str) -> None:
    """Delete every idea of the session but keep the session."""
    _owned_session(user_id, session_id)
    removed = _delete_session_ideas(session_id)
    _sessions().update_one({"_id": session_id}, {"$set": {"updatedAt": mongo.now_ms()}})
    log.info("cleared session %s (%d ideas)", session_id, removed)
