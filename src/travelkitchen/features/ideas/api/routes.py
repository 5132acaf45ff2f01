from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from travelkitchen.features.ideas.api.schemas import (
    AddIdeasRequest,
    CreateSessionRequest,
    ExpandIdeaRequest,
    FullRecipe,
    FullRecipeRequest,
    IdeasRequest,
    SessionInputs,
    StoredIdea,
)
from travelkitchen.features.ideas.app.use_cases import expand_idea, generate_ideas
from travelkitchen.features.ideas.infra import repository
from travelkitchen.features.recipes.domain.saving import recipe_from_idea
from travelkitchen.features.recipes.infra import repository as recipes_repository
from travelkitchen.shared.api.errors import ApiError, generation_errors, read_json_body, validate_payload
from travelkitchen.shared.persistence.errors import NotFoundError
from travelkitchen.shared.web.auth import AuthenticatedUser, get_current_user, get_optional_user, require_user

router = APIRouter(tags=["ideas"])

SIGN_IN_TO_GENERATE_IDEAS = "You must be signed in to generate recipe ideas"
INVALID_INPUT = "Invalid input data"


async def _payload(request: Request, model_cls):
    body = await read_json_body(request, INVALID_INPUT)
    return validate_payload(model_cls, body, INVALID_INPUT)


# ---- generation ------------------------------------------------------------

@router.post("/ai/generate-ideas")
async def generate_ideas_route(request: Request, user: Optional[AuthenticatedUser] = Depends(get_optional_user)):
    require_user(user, SIGN_IN_TO_GENERATE_IDEAS)
    req = await _payload(request, IdeasRequest)
    with generation_errors(
        "Ideas generation",
        parse_message="Failed to parse response. Please try again.",
        schema_message="Generated ideas have invalid structure. Please try again.",
    ):
        ideas = await generate_ideas(req)
    return {"ideas": [i.model_dump(by_alias=True) for i in ideas]}


@router.post("/ai/expand-idea")
async def expand_idea_route(request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    req = await _payload(request, ExpandIdeaRequest)
    with generation_errors(
        "Recipe expansion",
        parse_message="Failed to parse response. Please try again.",
        schema_message="Generated recipe has invalid structure. Please try again.",
    ):
        full_recipe = await expand_idea(req)
    return {"fullRecipe": full_recipe.model_dump(by_alias=True)}


# ---- sessions --------------------------------------------------------------

@router.get("/idea-sessions/active")
def active_session(user: AuthenticatedUser = Depends(get_current_user)):
    return {"session": repository.get_active_session(user.id)}


@router.post("/idea-sessions")
async def create_session(request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    req = await _payload(request, CreateSessionRequest)
    return {"id": repository.create_session(user.id, req.inputs)}


@router.get("/idea-sessions/{session_id}/ideas")
def session_ideas(session_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    return repository.get_session_ideas(user.id, session_id)


@router.post("/idea-sessions/{session_id}/ideas")
async def add_ideas(session_id: str, request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    req = await _payload(request, AddIdeasRequest)
    return {"ids": repository.add_ideas(user.id, session_id, req.ideas)}


@router.post("/idea-sessions/{session_id}/clear")
def clear_session(session_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    repository.clear_session(user.id, session_id)
    return {"ok": True}


@router.delete("/idea-sessions/{session_id}")
def delete_session(session_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    repository.delete_session(user.id, session_id)
    return {"ok": True}


# ---- ideas -----------------------------------------------------------------

@router.get("/ideas/{idea_id}")
def get_idea(idea_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    idea = repository.get_idea(user.id, idea_id)
    if idea is None:
        raise NotFoundError("Idea not found")
    return idea


@router.put("/ideas/{idea_id}/full-recipe")
async def attach_full_recipe(idea_id: str, request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    req = await _payload(request, FullRecipeRequest)
    return {"id": repository.update_idea_with_full_recipe(user.id, idea_id, req.full_recipe)}


@router.post("/ideas/{idea_id}/save")
def save_idea_as_recipe(idea_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    """Copy an expanded idea into the user's saved recipes."""
    doc = repository.get_idea(user.id, idea_id)
    if doc is None:
        raise NotFoundError("Idea not found")
    if not doc.get("fullRecipe"):
        raise ApiError(409, "Generate the full recipe before saving this idea")
    session = repository.get_session(user.id, doc["sessionId"])

    idea = StoredIdea.model_validate(doc)
    full_recipe = FullRecipe.model_validate(doc["fullRecipe"])
    inputs = SessionInputs.model_validate(session["inputs"])
    recipe_id = recipes_repository.save_recipe(user.id, recipe_from_idea(idea, full_recipe, inputs))
    return {"id": recipe_id}
