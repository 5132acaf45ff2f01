import pytest

from travelkitchen.features.ideas.api.schemas import IdeasRequest, SessionInputs, StoredIdea
from travelkitchen.features.ideas.domain.prompts import IDEAS_PER_BATCH, build_expand_prompt, build_ideas_prompt
from travelkitchen.features.recipes.api.schemas import ChatMessage, RecipeFormData, RecipeResponse
from travelkitchen.features.recipes.domain.catalogs import EQUIPMENT_OPTIONS, unavailable_options
from travelkitchen.features.recipes.domain.prompts import (
    RECIPE_UPDATE_MARKER,
    build_chat_system_prompt,
    build_recipe_prompt,
    build_update_system_prompt,
    diet_requirements,
    format_number,
    has_update_marker,
    render_transcript,
    strip_update_marker,
)

from conftest import SAMPLE_FORM, SAMPLE_IDEA, SAMPLE_RECIPE, SESSION_INPUTS, sample


def _form(**overrides):
    data = sample(SAMPLE_FORM)
    data.update(overrides)
    return RecipeFormData.model_validate(data)


def test_recipe_prompt_marks_missing_equipment_false():
    prompt = build_recipe_prompt(_form())
    assert "Hob / Stovetop=true" in prompt
    assert "Oven=false" in prompt
    assert "Microwave=false" in prompt
    assert "Oven=true" not in prompt


def test_recipe_prompt_fallbacks():
    prompt = build_recipe_prompt(_form())
    assert "Kitchen limitations: [none specified]" in prompt
    assert "Country/region: [not specified]" in prompt
    assert "Dietary requirements/allergies: [none]" in prompt
    assert "Ingredients I already have: [rice, eggs]" in prompt
    assert "Ingredients I'm willing to buy: [open to suggestions]" in prompt
    assert "Time limit: [20 minutes]" in prompt
    assert "Servings: [2]" in prompt
    assert "User notes" not in prompt


def test_recipe_prompt_diet_allergies_and_notes():
    prompt = build_recipe_prompt(
        _form(diet=["vegetarian"], allergies=["nuts", "dairy"], country="Japan", notes="  something warming ")
    )
    assert "Dietary requirements/allergies: [vegetarian, nuts allergy, dairy allergy]" in prompt
    assert "Country/region: [Japan]" in prompt
    assert 'User notes/special requests: "something warming"' in prompt


def test_blank_notes_are_left_out():
    assert "User notes" not in build_recipe_prompt(_form(notes="   "))


def test_diet_requirements_handles_missing_lists():
    assert diet_requirements(None, None) == []
    assert diet_requirements(["vegan"], ["soy"]) == ["vegan", "soy allergy"]


def test_chat_prompt_contains_recipe_and_marker():
    recipe = RecipeResponse.model_validate(SAMPLE_RECIPE)
    system = build_chat_system_prompt(recipe)
    assert "Title: Egg Fried Rice" in system
    assert "3. Rice: Add rice and fry." in system
    assert RECIPE_UPDATE_MARKER in system


def test_update_prompt_includes_transcript_and_constraints():
    recipe = RecipeResponse.model_validate(SAMPLE_RECIPE)
    messages = [
        ChatMessage(role="user", content="Can I add chicken?"),
        ChatMessage(role="assistant", content=f"Yes, fry it first. {RECIPE_UPDATE_MARKER}"),
    ]
    system = build_update_system_prompt(messages, recipe, _form(allergies=["nuts"]))
    assert "User: Can I add chicken?" in system
    assert "Assistant: Yes, fry it first." in system
    assert RECIPE_UPDATE_MARKER not in system.split("CONVERSATION WITH USER:")[1].split("ORIGINAL CONSTRAINTS:")[0]
    assert "- Equipment available: Hob / Stovetop" in system
    assert "- NOT available: Microwave, Oven, Kettle, Rice Cooker, Toaster" in system
    assert "- Dietary requirements: nuts allergy" in system


def test_marker_helpers():
    text = f"Swap the rice for noodles. {RECIPE_UPDATE_MARKER}"
    assert has_update_marker(text)
    assert not has_update_marker("Just a tip.")
    assert strip_update_marker(text) == "Swap the rice for noodles."
    assert render_transcript([ChatMessage(role="assistant", content=text)]) == "Assistant: Swap the rice for noodles."


def test_ideas_prompt_avoids_existing_titles():
    data = sample(SESSION_INPUTS)
    data.update({"existingTitles": ["Fried Rice", "Congee"], "context": "something with noodles"})
    prompt = build_ideas_prompt(IdeasRequest.model_validate(data))
    assert f"Generate {IDEAS_PER_BATCH} diverse recipe ideas" in prompt
    assert "AVOID these recipes (already generated): Fried Rice, Congee" in prompt
    assert 'USER\'S ADDITIONAL REQUEST: "something with noodles"' in prompt
    assert "- Available equipment: Hob / Stovetop, Kettle" in prompt
    assert "- NOT available: Microwave, Oven, Rice Cooker, Toaster" in prompt
    assert "- Base ingredient to use: rice" in prompt


def test_ideas_prompt_defaults():
    prompt = build_ideas_prompt(IdeasRequest.model_validate({"equipment": ["kettle"]}))
    assert "- Time limit: 30 minutes max" in prompt
    assert "AVOID" not in prompt
    assert "USER'S ADDITIONAL REQUEST" not in prompt


@pytest.mark.parametrize("equipment", [["hob"], ["kettle", "microwave"], []])
def test_ideas_prompt_names_unselected_equipment_only_as_unavailable(equipment):
    prompt = build_ideas_prompt(IdeasRequest.model_validate({"equipment": equipment}))
    for opt in unavailable_options(EQUIPMENT_OPTIONS, equipment):
        lines = [line for line in prompt.splitlines() if opt.label in line]
        assert lines == [line for line in lines if line.startswith("- NOT available:")], opt.label
        assert lines


def test_ideas_example_lists_selected_equipment():
    prompt = build_ideas_prompt(IdeasRequest.model_validate({"equipment": ["hob"]}))
    assert '"equipmentNeeded": ["Hob / Stovetop"],' in prompt


@pytest.mark.parametrize("value, text", [(30, "30"), (30.0, "30"), (2.5, "2.5"), (1000000, "1000000")])
def test_format_number(value, text):
    assert format_number(value) == text


def test_large_time_limit_is_not_in_exponent_form():
    prompt = build_ideas_prompt(IdeasRequest.model_validate({"equipment": ["hob"], "timeLimit": 1000000}))
    assert "- Time limit: 1000000 minutes max" in prompt


def test_expand_prompt():
    idea = StoredIdea.model_validate(SAMPLE_IDEA)
    prompt = build_expand_prompt(idea, SessionInputs.model_validate(SESSION_INPUTS))
    assert "Title: Tomato Egg Stir-fry" in prompt
    assert "Key Ingredients: tomato, eggs, rice" in prompt
    assert "- Dietary requirements: vegetarian" in prompt
    assert "- Ingredients user mentioned having: rice" in prompt
