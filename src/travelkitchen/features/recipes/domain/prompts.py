# src/travelkitchen/features/recipes/domain/prompts.py
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from travelkitchen.features.recipes.api.schemas import ChatMessage, RecipeFormData, RecipeResponse
from travelkitchen.features.recipes.domain.catalogs import EQUIPMENT_OPTIONS, label_for, unavailable_options

# Appended by the chat model when it proposes a change worth regenerating.
RECIPE_UPDATE_MARKER = "[RECIPE_UPDATE_AVAILABLE]"

RECIPE_OUTPUT_SCHEMA = """{
  "title": string,
  "summary": string,
  "assumptions": string[],
  "servings": integer,
  "time_minutes": integer,
  "equipment_used": string[],
  "shopping": {
    "have": string[],
    "need": string[],
    "optional": string[]
  },
  "prep_group": string[],
  "steps": [
    { "title": string, "detail": string, "time_minutes": integer }
  ],
  "substitutions": [
    { "ingredient": string, "swap_options": string[] }
  ],
  "diet_notes": string[]
}"""

RECIPE_SYSTEM_PROMPT = f"""You are Traveler's Kitchen, a recipe assistant for travelers cooking with limited equipment.

GOAL
Generate a practical, tasty recipe that the user can actually cook with their available equipment and in their current country. Prefer common, affordable ingredients and simple techniques.

HARD RULES
- Respect the user's available equipment. Do NOT include steps that require equipment they didn't select.
- Prefer 1-pot / 1-pan methods. Minimize dishes and prep.
- Prefer ingredients likely to be available in the user's country/region. If uncertain, offer substitutions.
- Keep the recipe short and scannable: 3-7 steps max.
- Avoid "Western specialty" ingredients unless the user listed them.
- Honor every dietary requirement and never use an ingredient the user is allergic to.
- Include food safety notes only when relevant (e.g., chicken).
- If key info is missing (e.g., servings), assume 1-2 servings and state the assumption.
- Pay close attention to the user's notes/preferences - they describe what kind of dish they want.

OUTPUT FORMAT (STRICT)
Return ONLY valid JSON matching this schema. No markdown, no extra text, no code blocks.
Minutes and servings are whole numbers.

{RECIPE_OUTPUT_SCHEMA}

QUALITY CHECK BEFORE YOU RESPOND
- Steps must not mention equipment marked =false.
- Ingredients should be coherent with the steps.
- Keep ingredient list compact (roughly 6-12 items).
- Each step should be doable in a hostel/shared kitchen."""


def format_number(value: float) -> str:
    """Whole numbers without a decimal point, anything else as given."""
    return str(int(value) if float(value).is_integer() else value)


def _joined(items: Optional[Sequence[str]], fallback: str) -> str:
    return ", ".join(items) if items else fallback


def diet_requirements(diet: Optional[Iterable[str]], allergies: Optional[Iterable[str]]) -> List[str]:
    """Diet tags followed by one "<allergen> allergy" entry per allergen."""
    return [*(diet or []), *(f"{a} allergy" for a in (allergies or []))]


def build_recipe_prompt(form: RecipeFormData) -> str:
    equipment = [f"{label_for(EQUIPMENT_OPTIONS, eq)}=true" for eq in form.equipment]
    equipment += [f"{opt.label}=false" for opt in unavailable_options(EQUIPMENT_OPTIONS, form.equipment)]
    diet_reqs = diet_requirements(form.diet, form.allergies)

    prompt = f"""Create one recipe with these constraints:

Equipment available: [{", ".join(equipment)}]
Kitchen limitations: [{_joined(form.limitations, "none specified")}]
Country/region: [{form.country or "not specified"}]
Dietary requirements/allergies: [{_joined(diet_reqs, "none")}]
Time limit: [{format_number(form.time_limit)} minutes]
Servings: [{format_number(form.servings)}]
Ingredients I already have: [{_joined(form.ingredients_have, "nothing specific")}]
Ingredients I'm willing to buy: [{_joined(form.ingredients_to_buy, "open to suggestions")}]
Taste preferences: [{_joined(form.preferences, "none specified")}]"""

    notes = (form.notes or "").strip()
    if notes:
        prompt += f"""

User notes/special requests: "{notes}"
Please pay special attention to these notes when designing the recipe."""

    prompt += """

Make it realistic to shop locally. If an ingredient might be hard to find, add substitutions."""
    return prompt


def _recipe_block(recipe: RecipeResponse, *, equipment_heading: str) -> str:
    steps = "\n".join(f"{i}. {s.title}: {s.detail}" for i, s in enumerate(recipe.steps, 1))
    return f"""Title: {recipe.title}
Summary: {recipe.summary}
Time: {format_number(recipe.time_minutes)} minutes
Servings: {format_number(recipe.servings)}
{equipment_heading}: {", ".join(recipe.equipment_used)}
Ingredients (have): {", ".join(recipe.shopping.have)}
Ingredients (need): {", ".join(recipe.shopping.need)}
Optional: {", ".join(recipe.shopping.optional)}
Steps:
{steps}"""


def build_chat_system_prompt(recipe: RecipeResponse) -> str:
    return f"""You are a helpful cooking assistant. The user has generated a recipe and wants to ask questions or make modifications.

CURRENT RECIPE:
{_recipe_block(recipe, equipment_heading="Equipment")}

INSTRUCTIONS:
- Answer questions about the recipe helpfully and concisely
- If the user asks to modify the recipe (add/remove ingredients, change cooking method, adjust servings, etc.), explain how it would work
- When you suggest a modification that would change the recipe, end your message with:
  "{RECIPE_UPDATE_MARKER}"
  This signals that the user can click a button to regenerate the recipe with your suggested changes.
- Never suggest equipment the recipe does not already use
- Keep responses friendly and practical
- Remember this is for travelers with limited kitchen equipment"""


def render_transcript(messages: Sequence[ChatMessage]) -> str:
    lines = []
    for m in messages:
        speaker = "User" if m.role == "user" else "Assistant"
        lines.append(f"{speaker}: {strip_update_marker(m.content)}")
    return "\n".join(lines)


UPDATE_USER_PROMPT = "Please regenerate the recipe with the modifications we discussed."


def build_update_system_prompt(
    messages: Sequence[ChatMessage],
    recipe: RecipeResponse,
    inputs: RecipeFormData,
) -> str:
    equipment = ", ".join(label_for(EQUIPMENT_OPTIONS, eq) for eq in inputs.equipment)
    unavailable = _joined([o.label for o in unavailable_options(EQUIPMENT_OPTIONS, inputs.equipment)], "none")
    diet_reqs = diet_requirements(inputs.diet, inputs.allergies)

    return f"""You are Traveler's Kitchen, a recipe assistant for travelers cooking with limited equipment.

You previously generated a recipe, and the user has been chatting with you about modifications. Now regenerate the recipe incorporating the discussed changes.

ORIGINAL RECIPE:
{_recipe_block(recipe, equipment_heading="Equipment used")}

CONVERSATION WITH USER:
{render_transcript(messages)}

ORIGINAL CONSTRAINTS:
- Equipment available: {equipment}
- NOT available: {unavailable}
- Country/region: {inputs.country or "not specified"}
- Dietary requirements: {_joined(diet_reqs, "none")}
- Time limit: {format_number(inputs.time_limit)} minutes
- Servings: {format_number(inputs.servings)}

INSTRUCTIONS:
- Regenerate the recipe incorporating the modifications discussed in the conversation
- Keep the same format and constraints: 3-7 steps, compact ingredient list
- Still respect equipment limitations and dietary requirements
- Update ingredients, steps, and any other relevant sections based on the discussion
- State any new assumptions in "assumptions"

OUTPUT FORMAT (STRICT)
Return ONLY valid JSON matching this schema. No markdown, no extra text, no code blocks.
Minutes and servings are whole numbers.

{RECIPE_OUTPUT_SCHEMA}"""


def has_update_marker(text: str) -> bool:
    return RECIPE_UPDATE_MARKER in (text or "")


def strip_update_marker(text: str) -> str:
    return (text or "").replace(RECIPE_UPDATE_MARKER, "", 1).strip()
