from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictStr, model_validator


class ProfileRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    email: Optional[str] = None


class MealPlanRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    diet_type: str = Field(..., alias="dietType")
    calories: float = Field(..., gt=0, description="Target calories per day")
    allergies: Optional[str] = None
    cuisine: Optional[str] = None
    snacks: bool = Field(..., description="Include a Snacks entry for each day")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: str
    subscription_active: bool = False


class SessionUser(BaseModel):
    id: str
    email_addresses: List[str] = Field(default_factory=list)  # verified only

    @property
    def primary_email(self) -> str:
        return self.email_addresses[0] if self.email_addresses else ""


class CreateStatus(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    OTHER_FAILURE = "other_failure"


class CreateResult(BaseModel):
    status: CreateStatus
    reason: Optional[str] = None

    @classmethod
    def created(cls) -> "CreateResult":
        return cls(status=CreateStatus.CREATED)

    @classmethod
    def already_exists(cls) -> "CreateResult":
        return cls(status=CreateStatus.ALREADY_EXISTS)

    @classmethod
    def other_failure(cls, reason: str) -> "CreateResult":
        return cls(status=CreateStatus.OTHER_FAILURE, reason=reason)


MEAL_NAMES = ("Breakfast", "Lunch", "Dinner", "Snacks")


class DayPlan(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    breakfast: Optional[StrictStr] = Field(None, alias="Breakfast")
    lunch: Optional[StrictStr] = Field(None, alias="Lunch")
    dinner: Optional[StrictStr] = Field(None, alias="Dinner")
    snacks: Optional[StrictStr] = Field(None, alias="Snacks")

    @model_validator(mode="before")
    @classmethod
    def canonical_meal_names(cls, data: Any) -> Any:
        # "breakfast" / "BREAKFAST" -> "Breakfast"; unknown keys are left for extra="forbid"
        if not isinstance(data, dict):
            return data
        canonical = {name.lower(): name for name in MEAL_NAMES}
        meals: Dict[Any, Any] = {}
        for key, value in data.items():
            name = canonical.get(str(key).lower(), key)
            if name in meals:
                raise ValueError(f"duplicate meal {name!r} (keys differ only in case)")
            meals[name] = value
        return meals


class MealPlan(RootModel[Dict[str, DayPlan]]):
    """Day name -> meals for that day. Built per request, never persisted."""

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def days(self) -> List[str]:
        return list(self.root)


class MealPlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_plan: Dict[str, Dict[str, str]] = Field(..., alias="mealPlan")
