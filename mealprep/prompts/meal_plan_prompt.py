from langchain_core.prompts import PromptTemplate

from mealprep.app.schemas import MealPlanRequest

MEAL_PLAN_TEMPLATE = """You are a professional nutritionist. Create a 7-day meal plan for someone following a {diet_type} diet with a target of {calories} calories per day.

Allergies or restrictions: {allergies}.
Preferred cuisine: {cuisine}.
Snacks included: {snacks_included}.

For each day from Monday to Sunday, provide:
- Breakfast
- Lunch
- Dinner
{snacks_line}
Keep ingredients simple, give short preparation notes, and include an approximate calorie count in every meal description.

Return a JSON object with one key per weekday name. Each day maps meal names ({meal_keys}) to a description string. Example:

{{
  "Monday": {{
{example_meals}
  }}
}}

Return only the raw JSON object: no commentary, no markdown, no backticks.
"""

_EXAMPLE_MEALS = {
    "Breakfast": "Oatmeal with berries - 350 calories",
    "Lunch": "Chickpea salad wrap - 500 calories",
    "Dinner": "Quinoa with roasted vegetables - 600 calories",
    "Snacks": "Handful of almonds - 150 calories",
}

meal_plan_prompt = PromptTemplate.from_template(MEAL_PLAN_TEMPLATE)


def _format_calories(calories: float) -> str:
    return str(int(calories)) if float(calories).is_integer() else str(calories)


def build_meal_plan_prompt(request: MealPlanRequest) -> str:
    meals = ["Breakfast", "Lunch", "Dinner"] + (["Snacks"] if request.snacks else [])
    example_meals = ",\n".join(f'    "{meal}": "{_EXAMPLE_MEALS[meal]}"' for meal in meals)
    return meal_plan_prompt.format(
        diet_type=request.diet_type,
        calories=_format_calories(request.calories),
        allergies=request.allergies or "none",
        cuisine=request.cuisine or "no preference",
        snacks_included="yes" if request.snacks else "no",
        snacks_line="- Snacks\n" if request.snacks else "",
        meal_keys=", ".join(meals),
        example_meals=example_meals,
    )
