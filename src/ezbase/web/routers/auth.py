from typing import Annotated

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel, Field

from ezbase.core.modules.log.models import RequestLog
from ezbase.core.modules.session.models import SESSION_COOKIE
from ezbase.core.modules.user.models import UserView
from ezbase.web.deps import AppDep, SessionTokenDep
from ezbase.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    """Email and password pair."""

    email: str = Field(..., description="Account email address")
    password: str = Field(..., description="Account password")


class LoginResponse(BaseModel):
    """Issued session."""

    session_id: str = Field(..., description="Session token, also set as the 'session' cookie")
    expires_at: int = Field(..., description="Unix timestamp the session expires at unless used before")


@router.post(
    "/signup_email",
    summary="Create account",
    description="Register a new account with email and password.",
    operation_id="signupEmail",
    responses={
        200: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid email, weak password or email already registered"},
    },
)
async def signup_email(signup_data: CredentialsRequest, app: AppDep) -> UserView:
    return await app.signup(signup_data.email, signup_data.password)


@router.post(
    "/login_email",
    summary="Authenticate user",
    description="Authenticate with email and password. Sets the 'session' cookie used by every protected route.",
    operation_id="loginEmail",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"description": "Invalid credentials"},
    },
)
async def login_email(login_data: CredentialsRequest, app: AppDep, response: Response) -> LoginResponse:
    session = await app.login(login_data.email, login_data.password)

    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.session_id,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
    )

    return LoginResponse(session_id=session.session_id, expires_at=session.active_period_expires_at)


@router.get(
    "/logout",
    summary="End session",
    description="Delete the session named by the 'session' cookie, if any, and clear the cookie.",
    operation_id="logout",
    responses={200: {"description": "Logged out"}},
)
async def logout(app: AppDep, token: SessionTokenDep, response: Response) -> str:
    await app.logout(token)
    response.delete_cookie(SESSION_COOKIE)
    return "Logged out"


@router.get(
    "/get_logs",
    summary="Get request logs",
    description="Most recent served requests, newest first.",
    operation_id="getLogs",
    tags=["logs"],
    responses={200: {"description": "Request log entries"}},
)
async def get_logs(
    app: AppDep,
    limit: Annotated[int | None, Query(ge=1, le=10000, description="Maximum entries to return")] = None,
) -> list[RequestLog]:
    return await app.get_logs(limit)
