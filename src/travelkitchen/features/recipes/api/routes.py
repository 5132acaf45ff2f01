from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from travelkitchen.features.recipes.api.schemas import (
    RecipeChatRequest,
    RecipeFormData,
    RecipeResponse,
    SaveRecipeRequest,
    StrictModel,
    UpdateRecipeRequest,
)
from travelkitchen.features.recipes.app.use_cases import generate_recipe, stream_recipe_chat, update_recipe
from travelkitchen.features.recipes.domain.catalogs import catalogs_payload
from travelkitchen.features.recipes.domain.saving import recipe_from_generation
from travelkitchen.features.recipes.infra import repository
from travelkitchen.shared.api.errors import (
    UNEXPECTED_ERROR,
    ApiError,
    generation_errors,
    read_json_body,
    validate_payload,
)
from travelkitchen.shared.persistence.errors import NotFoundError
from travelkitchen.shared.web.auth import AuthenticatedUser, get_current_user, get_optional_user, require_user

log = logging.getLogger("recipes")

router = APIRouter(tags=["recipes"])

SIGN_IN_TO_GENERATE = "You must be signed in to generate recipes"
INVALID_FORM = "Invalid form data"
INVALID_INPUT = "Invalid input data"
RETRY_PARSE = "Failed to parse recipe response. Please try again."
RETRY_SCHEMA = "Generated recipe has invalid structure. Please try again."


class GeneratedRecipePayload(StrictModel):
    recipe: RecipeResponse
    inputs: RecipeFormData


async def _payload(request: Request, model_cls, message: str):
    body = await read_json_body(request, message)
    return validate_payload(model_cls, body, message)


@router.get("/options")
def options():
    return catalogs_payload()


# ---- generation ------------------------------------------------------------

@router.post("/ai/new-recipe")
async def new_recipe(request: Request, user: Optional[AuthenticatedUser] = Depends(get_optional_user)):
    require_user(user, SIGN_IN_TO_GENERATE)
    form = await _payload(request, RecipeFormData, INVALID_FORM)
    with generation_errors("Recipe generation", parse_message=RETRY_PARSE, schema_message=RETRY_SCHEMA):
        recipe = await generate_recipe(form)
    return {
        "recipe": recipe.model_dump(),
        "inputs": form.model_dump(by_alias=True, exclude_none=True),
    }


@router.post("/ai/update-recipe")
async def update_recipe_route(request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    req = await _payload(request, UpdateRecipeRequest, INVALID_INPUT)
    with generation_errors("Recipe update", parse_message=RETRY_PARSE, schema_message=RETRY_SCHEMA):
        recipe = await update_recipe(req)
    return {"recipe": recipe.model_dump()}


@router.post("/ai/recipe-chat")
async def recipe_chat(request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    req = await _payload(request, RecipeChatRequest, INVALID_INPUT)
    stream = stream_recipe_chat(req)

    # Pull the first token before answering so upstream failures still get a 500.
    try:
        first: Optional[str] = await stream.__anext__()
    except StopAsyncIteration:
        first = None
    except Exception:
        log.exception("Recipe chat error")
        raise ApiError(500, UNEXPECTED_ERROR) from None

    async def body():
        if first:
            yield first
        try:
            async for tok in stream:
                yield tok
        except Exception:
            log.exception("Recipe chat stream aborted")

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")


# ---- saved recipes ---------------------------------------------------------

@router.get("/recipes")
def list_my_recipes(user: AuthenticatedUser = Depends(get_current_user)):
    return repository.list_my_recipes(user.id)


@router.post("/recipes")
async def save_recipe(request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    data = await _payload(request, SaveRecipeRequest, INVALID_INPUT)
    return {"id": repository.save_recipe(user.id, data)}


@router.post("/recipes/from-generation")
async def save_generated_recipe(request: Request, user: AuthenticatedUser = Depends(get_current_user)):
    payload = await _payload(request, GeneratedRecipePayload, INVALID_INPUT)
    data = recipe_from_generation(payload.recipe, payload.inputs)
    return {"id": repository.save_recipe(user.id, data)}


@router.get("/recipes/published")
def list_published_recipes():
    return repository.list_published_recipes()


@router.get("/recipes/{recipe_id}")
def get_recipe(recipe_id: str, user: Optional[AuthenticatedUser] = Depends(get_optional_user)):
    doc = repository.get_recipe(recipe_id, user.id if user else None)
    if doc is None:
        raise NotFoundError("Recipe not found")
    return doc


@router.post("/recipes/{recipe_id}/publish")
def toggle_publish(recipe_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    return repository.toggle_publish(user.id, recipe_id)


@router.delete("/recipes/{recipe_id}")
def delete_recipe(recipe_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    repository.delete_recipe(user.id, recipe_id)
    return {"ok": True}
