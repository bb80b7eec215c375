import logging

from mealprep.app.errors import InvalidMealPlanShapeError, UnparsableMealPlanError
from mealprep.app.schemas import MealPlan, MealPlanRequest
from mealprep.prompts.meal_plan_prompt import build_meal_plan_prompt
from mealprep.services.meal_plan_parser import MealPlanErrorKind, parse_meal_plan
from mealprep.tools.completion_client import CompletionClient

logger = logging.getLogger(__name__)


class MealPlanGenerator:
    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    def generate(self, request: MealPlanRequest) -> MealPlan:
        prompt = build_meal_plan_prompt(request)
        text = self.completion_client.complete(prompt)
        logger.debug("Completion content: %s", text)

        result = parse_meal_plan(text)
        if result.error is not None:
            if result.error.kind is MealPlanErrorKind.UNPARSABLE:
                raise UnparsableMealPlanError(details=result.error.detail)
            raise InvalidMealPlanShapeError(details=result.error.detail)

        logger.info(
            "Meal plan generated: diet=%s days=%d snacks=%s",
            request.diet_type,
            len(result.plan.days),
            request.snacks,
        )
        return result.plan
