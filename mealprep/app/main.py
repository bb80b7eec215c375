import logging
from functools import partial
from typing import Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from mealprep.app.errors import MealPrepError
from mealprep.app.logging import configure_logging
from mealprep.app.schemas import (
    ErrorResponse,
    MealPlanRequest,
    MealPlanResponse,
    MessageResponse,
    ProfileRequest,
)
from mealprep.app.settings import settings
from mealprep.services.meal_plan_generator import MealPlanGenerator
from mealprep.services.profile_provisioner import ProfileProvisioner, ProvisionStatus, SessionAccessor
from mealprep.store.database import init_db
from mealprep.store.profile_store import ProfileStore
from mealprep.tools.completion_client import CompletionClient
from mealprep.tools.identity import HttpIdentityProvider

configure_logging(settings.log_level)

app = FastAPI(title="Meal Plan Service")
logger = logging.getLogger(__name__)

profile_store = ProfileStore()
identity_provider = HttpIdentityProvider()
completion_client = CompletionClient()


@app.on_event("startup")
def create_tables():
    init_db()


@app.exception_handler(MealPrepError)
async def mealprep_error_handler(request: Request, exc: MealPrepError):
    body = ErrorResponse(error=exc.message, details=exc.details if exc.expose_details else None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
    body = ErrorResponse(error="Invalid request body.", details=str(exc.errors()))
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


def get_profile_store() -> ProfileStore:
    return profile_store


def get_identity_provider() -> HttpIdentityProvider:
    return identity_provider


def get_session_user(
    authorization: Optional[str] = Header(None),
    provider: HttpIdentityProvider = Depends(get_identity_provider),
) -> SessionAccessor:
    # Deferred: the provider is only called when the body carries no user id
    return partial(provider.current_user, authorization)


async def get_profile_request(request: Request) -> ProfileRequest:
    # An unreadable body counts as "no identity in the body"; the session is consulted instead
    try:
        body = await request.json()
    except (ValueError, RecursionError) as exc:
        logger.warning("Failed to parse create-profile body: %s", exc)
        return ProfileRequest()
    if not isinstance(body, dict):
        logger.warning("Ignoring non-object create-profile body (%s)", type(body).__name__)
        return ProfileRequest()
    try:
        return ProfileRequest.model_validate(body)
    except ValidationError as exc:
        logger.warning("Ignoring create-profile body with invalid fields: %s", exc.errors())
        return ProfileRequest()


def get_completion_client() -> CompletionClient:
    return completion_client


@app.post(
    "/api/create-profile",
    response_model=MessageResponse,
    status_code=201,
    responses={200: {"model": MessageResponse}, 400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_profile(
    payload: ProfileRequest = Depends(get_profile_request),
    store: ProfileStore = Depends(get_profile_store),
    session_user: SessionAccessor = Depends(get_session_user),
):
    logger.info("Request to create-profile started")
    try:
        status = ProfileProvisioner(store).provision(
            user_id=payload.user_id,
            email=payload.email,
            session_user=session_user,
        )
    except MealPrepError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("create-profile handler failed")
        raise MealPrepError("Internal Server Error.", details=str(exc)) from exc

    if status is ProvisionStatus.ALREADY_EXISTS:
        return JSONResponse(status_code=200, content={"message": "Profile already exists."})
    return MessageResponse(message="Profile created successfully.")


@app.post(
    "/api/generate-mealplan",
    response_model=MealPlanResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_mealplan(
    payload: MealPlanRequest,
    client: CompletionClient = Depends(get_completion_client),
):
    try:
        plan = MealPlanGenerator(client).generate(payload)
    except MealPrepError as exc:
        logger.error("Meal plan generation failed: %s (%s)", exc.message, exc.details)
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("generate-mealplan handler failed")
        raise MealPrepError("Failed to generate meal plan. Please try again later.") from exc
    return MealPlanResponse(meal_plan=plan.to_dict())


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
