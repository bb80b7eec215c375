"""Turn completion text into a validated MealPlan without raising on bad input."""
import json
import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ValidationError

from mealprep.app.schemas import MealPlan

logger = logging.getLogger(__name__)


class MealPlanErrorKind(str, Enum):
    UNPARSABLE = "unparsable"
    INVALID_SHAPE = "invalid_shape"


class MealPlanParseError(BaseModel):
    kind: MealPlanErrorKind
    detail: str


class MealPlanParseResult(BaseModel):
    plan: Optional[MealPlan] = None
    error: Optional[MealPlanParseError] = None

    @property
    def ok(self) -> bool:
        return self.plan is not None

    @classmethod
    def failure(cls, kind: MealPlanErrorKind, detail: str) -> "MealPlanParseResult":
        return cls(error=MealPlanParseError(kind=kind, detail=detail))


def parse_meal_plan(text: str) -> MealPlanParseResult:
    content = (text or "").strip()

    try:
        raw = json.loads(content)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.error("Completion text is not valid JSON: %s", exc)
        return MealPlanParseResult.failure(MealPlanErrorKind.UNPARSABLE, str(exc))

    if not isinstance(raw, dict):
        detail = f"expected a JSON object, got {type(raw).__name__}"
        logger.error("Meal plan has the wrong shape: %s", detail)
        return MealPlanParseResult.failure(MealPlanErrorKind.INVALID_SHAPE, detail)

    try:
        plan = MealPlan.model_validate(raw)
    except ValidationError as exc:
        logger.error("Meal plan failed per-day validation: %s", exc)
        return MealPlanParseResult.failure(MealPlanErrorKind.INVALID_SHAPE, str(exc))

    return MealPlanParseResult(plan=plan)
