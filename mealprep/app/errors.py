"""Error taxonomy shared by the profile and meal-plan endpoints.

Every error carries a stable caller-facing ``message`` plus optional
diagnostic ``details``; the API layer renders them into the JSON body
and uses ``status_code`` for the HTTP status. Errors with
``expose_details = False`` keep their details for the logs only.
"""
from typing import Optional


class MealPrepError(Exception):
    status_code: int = 500
    expose_details: bool = True

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class MissingIdentityError(MealPrepError):
    status_code = 400

    def __init__(self, message: str = "Could not determine user ID."):
        super().__init__(message)


class EmptyIdentityAfterSanitizationError(MealPrepError):
    status_code = 400

    def __init__(self, message: str = "User ID is empty after sanitization."):
        super().__init__(message)


class StoreLookupError(MealPrepError):
    """Raised by the store when a lookup fails; the provisioner logs it and carries on."""


class StoreWriteError(MealPrepError):
    pass


class MealPlanError(MealPrepError):
    expose_details = False


class CompletionServiceError(MealPlanError):
    def __init__(
        self,
        message: str = "Failed to generate meal plan. Please try again later.",
        details: Optional[str] = None,
    ):
        super().__init__(message, details)


class UnparsableMealPlanError(MealPlanError):
    def __init__(self, message: str = "Failed to parse meal plan. Please try again.", details: Optional[str] = None):
        super().__init__(message, details)


class InvalidMealPlanShapeError(MealPlanError):
    def __init__(
        self,
        message: str = "Invalid meal plan format received. Please try again.",
        details: Optional[str] = None,
    ):
        super().__init__(message, details)
