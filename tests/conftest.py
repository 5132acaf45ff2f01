"""
Shared fixtures: in-memory MongoDB, a fake model and switchable auth.
"""
import copy
import json
import os

# Set test environment before importing travelkitchen modules
os.environ.setdefault("OPENAI_API_KEY", "test-key-not-real")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import mongomock
import pytest
from fastapi.testclient import TestClient

from travelkitchen.app import app
from travelkitchen.shared.api.errors import ApiError
from travelkitchen.shared.persistence import mongo
from travelkitchen.shared.web.auth import (
    SIGN_IN_REQUIRED,
    AuthenticatedUser,
    get_current_user,
    get_optional_user,
)


SAMPLE_FORM = {
    "equipment": ["hob"],
    "ingredientsHave": ["rice", "eggs"],
    "servings": 2,
    "timeLimit": 20,
}

SAMPLE_RECIPE = {
    "title": "Egg Fried Rice",
    "summary": "Quick one-pan fried rice.",
    "assumptions": ["Rice is already cooked"],
    "servings": 2,
    "time_minutes": 15,
    "equipment_used": ["Hob / Stovetop"],
    "shopping": {"have": ["rice", "eggs"], "need": ["spring onion"], "optional": ["soy sauce"]},
    "prep_group": ["Slice the spring onion"],
    "steps": [
        {"title": "Heat", "detail": "Heat oil in a pan.", "time_minutes": 2},
        {"title": "Eggs", "detail": "Scramble the eggs.", "time_minutes": 3},
        {"title": "Rice", "detail": "Add rice and fry.", "time_minutes": 10},
    ],
    "substitutions": [{"ingredient": "spring onion", "swap_options": ["onion", "chives"]}],
    "diet_notes": ["Vegetarian"],
}

SAMPLE_IDEA = {
    "title": "Tomato Egg Stir-fry",
    "description": "A homely Chinese classic.",
    "keyIngredients": ["tomato", "eggs", "rice"],
    "estimatedTime": 20,
    "servings": 2,
    "equipmentNeeded": ["Hob / Stovetop"],
    "dietaryTags": ["vegetarian"],
    "difficulty": "easy",
}

SAMPLE_FULL_RECIPE = {
    "shopping": {"have": ["eggs"], "need": ["tomato"], "optional": ["spring onion"]},
    "prepGroup": ["Chop tomatoes"],
    "steps": [
        {"title": "Scramble", "detail": "Softly scramble the eggs.", "time_minutes": 3},
        {"title": "Stew", "detail": "Cook tomatoes down, fold in eggs.", "time_minutes": 8},
    ],
    "substitutions": [{"ingredient": "tomato", "swap_options": ["canned tomatoes"]}],
    "tips": ["Salt the tomatoes early"],
}

SESSION_INPUTS = {
    "equipment": ["hob", "kettle"],
    "dietaryPreferences": ["vegetarian"],
    "country": "Vietnam",
    "baseIngredient": "rice",
    "timeLimit": 30,
}


def sample(data):
    return copy.deepcopy(data)


@pytest.fixture(autouse=True)
def db():
    database = mongomock.MongoClient()["travelkitchen_test"]
    mongo.set_db(database)
    yield database
    mongo.set_db(None)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Call login("user-1") to act as that user, login(None) to sign out."""
    state = {"user": None}

    async def current_user():
        if state["user"] is None:
            raise ApiError(401, SIGN_IN_REQUIRED)
        return state["user"]

    async def optional_user():
        return state["user"]

    app.dependency_overrides[get_current_user] = current_user
    app.dependency_overrides[get_optional_user] = optional_user

    def _login(user_id):
        state["user"] = AuthenticatedUser(id=user_id) if user_id else None

    yield _login
    app.dependency_overrides.clear()


class FakeModel:
    """Stands in for the OpenAI client: queued replies in, prompts recorded."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def reply(self, text):
        if not isinstance(text, str):
            text = json.dumps(text)
        self.replies.append(text)

    async def complete_chat(self, messages, **kwargs):
        self.calls.append(messages)
        return self.replies.pop(0)

    async def stream_chat(self, messages, **kwargs):
        self.calls.append(messages)
        for tok in self.replies.pop(0):
            yield tok

    @property
    def last_system(self):
        return self.calls[-1][0]["content"]

    @property
    def last_prompt(self):
        return self.calls[-1][-1]["content"]


@pytest.fixture
def fake_model(monkeypatch):
    fake = FakeModel()
    monkeypatch.setattr("travelkitchen.shared.llm.structured.complete_chat", fake.complete_chat)
    monkeypatch.setattr("travelkitchen.features.recipes.app.use_cases.stream_chat", fake.stream_chat)
    return fake
