import json

import pytest

from travelkitchen.features.ideas.api.schemas import FullRecipe, IdeasResponse
from travelkitchen.features.recipes.api.schemas import RecipeResponse
from travelkitchen.shared.llm.model_output import (
    ModelOutputParseError,
    ModelOutputSchemaError,
    parse_model_output,
    strip_code_fences,
)

from conftest import SAMPLE_FULL_RECIPE, SAMPLE_IDEA, SAMPLE_RECIPE, sample


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1}',
        '  {"a": 1}\n',
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '```json{"a": 1}```',
    ],
)
def test_strip_code_fences(text):
    assert strip_code_fences(text) == '{"a": 1}'


def test_strip_code_fences_leaves_inner_text_alone():
    assert strip_code_fences("say ```hi``` there") == "say ```hi``` there"


def test_parse_fenced_recipe():
    text = "```json\n" + json.dumps(SAMPLE_RECIPE) + "\n```"
    recipe = parse_model_output(text, RecipeResponse)
    assert recipe.title == "Egg Fried Rice"
    assert recipe.steps[2].time_minutes == 10


def test_parse_error_keeps_raw_text():
    with pytest.raises(ModelOutputParseError) as exc:
        parse_model_output("Sure! Here is your recipe:", RecipeResponse)
    assert exc.value.raw_text == "Sure! Here is your recipe:"


def test_missing_field_is_schema_error():
    data = sample(SAMPLE_RECIPE)
    del data["steps"]
    with pytest.raises(ModelOutputSchemaError):
        parse_model_output(json.dumps(data), RecipeResponse)


@pytest.mark.parametrize("bad", ["2", True, None])
def test_numbers_are_not_coerced(bad):
    data = sample(SAMPLE_RECIPE)
    data["servings"] = bad
    with pytest.raises(ModelOutputSchemaError):
        parse_model_output(json.dumps(data), RecipeResponse)


def test_extra_keys_are_ignored():
    data = sample(SAMPLE_RECIPE)
    data["calories"] = 500
    recipe = parse_model_output(json.dumps(data), RecipeResponse)
    assert not hasattr(recipe, "calories")


def test_snake_case_keys_do_not_stand_in_for_wire_names():
    full = sample(SAMPLE_FULL_RECIPE)
    full["prep_group"] = full.pop("prepGroup")
    with pytest.raises(ModelOutputSchemaError):
        parse_model_output(json.dumps(full), FullRecipe)

    idea = sample(SAMPLE_IDEA)
    idea["key_ingredients"] = idea.pop("keyIngredients")
    with pytest.raises(ModelOutputSchemaError):
        parse_model_output(json.dumps({"ideas": [idea]}), IdeasResponse)


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_numbers_are_parse_errors(constant):
    text = json.dumps(SAMPLE_RECIPE).replace('"time_minutes": 15', f'"time_minutes": {constant}')
    assert constant in text
    with pytest.raises(ModelOutputParseError):
        parse_model_output(text, RecipeResponse)
