# src/travelkitchen/features/ideas/domain/prompts.py
from __future__ import annotations

import json
from typing import List

from travelkitchen.features.ideas.api.schemas import IdeasRequest, SessionInputs, StoredIdea
from travelkitchen.features.recipes.domain.catalogs import EQUIPMENT_OPTIONS, labels_for, unavailable_options
from travelkitchen.features.recipes.domain.prompts import diet_requirements, format_number

IDEAS_PER_BATCH = 4
DEFAULT_TIME_LIMIT = 30

IDEAS_SYSTEM_PROMPT = (
    "You are Traveler's Kitchen, a recipe assistant for travelers cooking with limited equipment. "
    "Generate creative but practical recipe ideas that can actually be made in basic kitchens "
    "like hostels and guesthouses."
)

EXPAND_SYSTEM_PROMPT = (
    "You are Traveler's Kitchen, a recipe assistant for travelers. Generate detailed, practical "
    "recipes that can be made in basic kitchens like hostels and guesthouses."
)

# equipmentNeeded is filled with the selected labels only
IDEAS_OUTPUT_EXAMPLE = """{
  "ideas": [
    {
      "title": "Recipe Name",
      "description": "2-3 sentence description of the dish",
      "keyIngredients": ["ingredient1", "ingredient2"],
      "estimatedTime": 25,
      "servings": 2,
      "equipmentNeeded": <equipment>,
      "dietaryTags": ["vegetarian", "gluten-free"],
      "difficulty": "easy"
    }
  ]
}"""

FULL_RECIPE_OUTPUT_EXAMPLE = """{
  "shopping": {
    "have": ["ingredients user likely has"],
    "need": ["ingredients to buy"],
    "optional": ["nice to have but not essential"]
  },
  "prepGroup": ["prep task 1", "prep task 2"],
  "steps": [
    { "title": "Step Title", "detail": "Detailed instructions", "time_minutes": 5 }
  ],
  "substitutions": [
    { "ingredient": "hard to find item", "swap_options": ["option 1", "option 2"] }
  ],
  "tips": ["helpful tip 1", "helpful tip 2"]
}"""


def ideas_output_example(equipment_labels: List[str]) -> str:
    return IDEAS_OUTPUT_EXAMPLE.replace("<equipment>", json.dumps(equipment_labels))


def build_ideas_prompt(request: IdeasRequest) -> str:
    available_labels = labels_for(EQUIPMENT_OPTIONS, request.equipment)
    available = ", ".join(available_labels) or "none"
    unavailable = ", ".join(o.label for o in unavailable_options(EQUIPMENT_OPTIONS, request.equipment)) or "none"
    diet_reqs = diet_requirements(request.dietary_preferences, request.allergens)
    time_limit = request.time_limit if request.time_limit is not None else DEFAULT_TIME_LIMIT

    constraints: List[str] = [
        f"- Available equipment: {available}",
        f"- NOT available: {unavailable}",
        f"- Country/region: {request.country or 'not specified'}",
        f"- Dietary requirements: {', '.join(diet_reqs) if diet_reqs else 'none'}",
        f"- Time limit: {format_number(time_limit)} minutes max",
    ]
    if request.base_ingredient:
        constraints.append(f"- Base ingredient to use: {request.base_ingredient}")
    if request.additional_ingredients:
        constraints.append(f"- Additional ingredients available: {', '.join(request.additional_ingredients)}")

    prompt = (
        f"Generate {IDEAS_PER_BATCH} diverse recipe ideas for a traveler cooking with limited equipment.\n\n"
        "CONSTRAINTS:\n" + "\n".join(constraints)
    )

    if request.existing_titles:
        prompt += f"\n\nAVOID these recipes (already generated): {', '.join(request.existing_titles)}"

    if request.context:
        prompt += (
            f'\n\nUSER\'S ADDITIONAL REQUEST: "{request.context}"\n'
            "Please incorporate this feedback into your suggestions."
        )

    prompt += f"""

REQUIREMENTS:
- Each idea must be practical for a hostel/guesthouse kitchen
- Vary the cuisine styles and cooking methods
- Include a mix of difficulties ("easy", "medium" or "hard")
- Keep ingredient lists realistic (6-10 key ingredients each)
- All recipes must be achievable with the available equipment only
- Prefer ingredients easy to find in the country/region
- estimatedTime and servings are whole numbers

Return ONLY valid JSON (no markdown, no code blocks) with this structure:
{ideas_output_example(available_labels)}"""
    return prompt


def build_expand_prompt(idea: StoredIdea, session_inputs: SessionInputs) -> str:
    equipment = ", ".join(labels_for(EQUIPMENT_OPTIONS, session_inputs.equipment)) or "none"
    unavailable = ", ".join(o.label for o in unavailable_options(EQUIPMENT_OPTIONS, session_inputs.equipment)) or "none"
    diet_reqs = diet_requirements(session_inputs.dietary_preferences, session_inputs.allergens)
    available_ingredients = [
        *([session_inputs.base_ingredient] if session_inputs.base_ingredient else []),
        *(session_inputs.additional_ingredients or []),
    ]

    return f"""Generate the full recipe details for this recipe idea:

RECIPE TO EXPAND:
Title: {idea.title}
Description: {idea.description}
Key Ingredients: {", ".join(idea.key_ingredients)}
Estimated Time: {format_number(idea.estimated_time)} minutes
Servings: {format_number(idea.servings)}
Equipment Needed: {", ".join(idea.equipment_needed)}
Difficulty: {idea.difficulty}

CONSTRAINTS:
- Available equipment: {equipment}
- NOT available: {unavailable}
- Country/region: {session_inputs.country or "not specified"}
- Dietary requirements: {", ".join(diet_reqs) if diet_reqs else "none"}
- Ingredients user mentioned having: {", ".join(available_ingredients) if available_ingredients else "none specified"}

REQUIREMENTS:
- Categorize ingredients into "have" (from user's list), "need" (must buy), and "optional" (nice to have)
- Keep steps clear and simple (3-7 steps max)
- Include practical substitutions for harder-to-find ingredients
- Add helpful tips for travelers cooking in basic kitchens
- time_minutes is a whole number

Return ONLY valid JSON (no markdown, no code blocks) with this structure:
{FULL_RECIPE_OUTPUT_EXAMPLE}"""
