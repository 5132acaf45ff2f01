from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument

from travelkitchen.features.recipes.api.schemas import SaveRecipeRequest
from travelkitchen.shared.persistence import mongo
from travelkitchen.shared.persistence.errors import NotAuthorizedError, NotFoundError

log = logging.getLogger("recipes")


def _coll():
    return mongo.get_db().get_collection(mongo.RECIPES)


def _owned(user_id: str, recipe_id: str) -> Dict[str, Any]:
    doc = _coll().find_one({"_id": recipe_id})
    if not doc:
        raise NotFoundError("Recipe not found")
    if doc.get("userId") != user_id:
        raise NotAuthorizedError("Not authorized")
    return doc


def save_recipe(user_id: str, data: SaveRecipeRequest) -> str:
    """
    Store a generated recipe for `user_id`. New recipes start unpublished.
    """
    doc = data.model_dump(by_alias=True, exclude_none=True)
    doc.update({
        "_id": mongo.new_id(),
        "userId": user_id,
        "isPublished": False,
        "createdAt": mongo.now_ms(),
    })
    _coll().insert_one(doc)
    log.info("saved recipe %s for user %s", doc["_id"], user_id)
    return doc["_id"]


def list_my_recipes(user_id: str) -> List[Dict[str, Any]]:
    return list(_coll().find({"userId": user_id}).sort("createdAt", DESCENDING))


def get_recipe(recipe_id: str, viewer_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Published recipes are visible to anyone; unpublished ones only to their owner.
    Anything else reads as missing.
    """
    doc = _coll().find_one({"_id": recipe_id})
    if not doc:
        return None
    if doc.get("isPublished"):
        return doc
    if viewer_id is None or doc.get("userId") != viewer_id:
        return None
    return doc


def list_published_recipes() -> List[Dict[str, Any]]:
    return list(_coll().find({"isPublished": True}).sort("createdAt", DESCENDING))


def toggle_publish(user_id: str, recipe_id: str) -> Dict[str, Any]:
    """
    Flip the publication flag. Publishing stamps publishedAt with the current
    time (re-publishing overwrites it); unpublishing removes it.
    """
    doc = _owned(user_id, recipe_id)
    if doc.get("isPublished"):
        update = {"$set": {"isPublished": False}, "$unset": {"publishedAt": ""}}
    else:
        update = {"$set": {"isPublished": True, "publishedAt": mongo.now_ms()}}
    return _coll().find_one_and_update({"_id": recipe_id}, update, return_document=ReturnDocument.AFTER)


def delete_recipe(user_id: str, recipe_id: str) -> None:
    _owned(user_id, recipe_id)
    _coll().delete_one({"_id": recipe_id})
    log.info("deleted recipe %s for user %s", recipe_id, user_id)
