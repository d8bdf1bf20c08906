"""Admin, auth and rally maintenance API routes, run with the service-role backend key."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..constants import PENDING_USER_COLUMNS
from ..data import DataError, NotFound, Repositories, user_message
from ..services.rallies import RallyService

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])
auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
health_router = APIRouter(prefix="/api", tags=["health"])
rallies_router = APIRouter(prefix="/api/rallies", tags=["rallies"])

# Rallies listed by the status health check.
STATUS_SUMMARY_LIMIT = 10


def current_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def current_rally_service(request: Request) -> RallyService:
    return RallyService(current_repositories(request).rallies, request.app.state.cache)


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


# --- Pydantic schemas ---


class DeleteUserRequest(BaseModel):
    userId: str | None = None


class DeletedUser(BaseModel):
    name: str
    email: str


class DeleteUserResponse(BaseModel):
    message: str
    userId: str
    deletedUser: DeletedUser


class UserSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: datetime | None = None
    email_verified: bool
    admin_approved: bool
    status: str


class ResetTokenRequest(BaseModel):
    token: str | None = None


class ResetTokenResponse(BaseModel):
    valid: bool
    email: str



class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusUpdate(_CamelModel):
    rally_id: str
    name: str
    old_status: str
    new_status: str
    success: bool
    error: str | None = None


class StatusUpdateResponse(_CamelModel):
    success: bool = True
    updated: int
    total: int
    updates: list[StatusUpdate]
    timestamp: datetime | None = None


class RallyStatusSummary(_CamelModel):
    id: str
    name: str
    current_status: str
    expected_status: str
    needs_update: bool
    competition_date: datetime
    registration_deadline: datetime | None = None


class StatusHealthResponse(_CamelModel):
    success: bool = True
    total_rallies: int
    rallies_needing_update: int
    rallies: list[RallyStatusSummary]
    timestamp: datetime


# --- Routes ---


@health_router.get("/health")
async def health():
    return {"status": "ok"}


@admin_router.delete("/delete-user", response_model=DeleteUserResponse)
async def delete_user(
    body: DeleteUserRequest | None = None,
    repos: Repositories = Depends(current_repositories),
):
    """Delete a user; memberships and results go with it via backend cascades."""
    user_id = body.userId if body is not None else None
    if not user_id:
        return _error(400, "User ID is required")
    try:
        user = await repos.users.get_user(user_id)
    except NotFound:
        return _error(404, "User not found")
    except DataError as exc:
        logger.error("lookup of user %s failed: %s", user_id, exc)
        return _error(500, "Internal server error")
    try:
        await repos.users.delete_user(user_id)
    except DataError as exc:
        logger.error("deleting user %s failed: %s", user_id, exc)
        return _error(500, "Failed to delete user")
    logger.info("deleted user %s (%s)", user_id, user.email)
    return DeleteUserResponse(
        message="User deleted successfully",
        userId=user_id,
        deletedUser=DeletedUser(name=user.name, email=user.email),
    )


@admin_router.get("/pending-users", response_model=list[UserSummary], response_model_by_alias=True)
async def pending_users(repos: Repositories = Depends(current_repositories)):
    """Every user, newest first, for the approval table."""
    try:
        users = await repos.users.list_users(columns=PENDING_USER_COLUMNS)
    except DataError as exc:
        logger.error("listing users failed: %s", exc)
        return _error(500, "Failed to fetch users")
    return [UserSummary.model_validate(u.model_dump()) for u in users]


@auth_router.post("/validate-reset-token", response_model=ResetTokenResponse)
async def validate_reset_token(
    body: ResetTokenRequest | None = None,
    repos: Repositories = Depends(current_repositories),
):
    token = body.token if body is not None else None
    if not token:
        return _error(400, "Token is required", valid=False)
    try:
        reset = await repos.password_resets.find_valid(token, datetime.now(UTC))
    except DataError as exc:
        logger.error("reset token validation failed: %s", exc)
        return _error(500, "Server error", valid=False)
    if reset is None:
        return _error(400, "Token is expired or invalid", valid=False)
    return ResetTokenResponse(valid=True, email=reset.email)


@rallies_router.post(
    "/update-statuses", response_model=StatusUpdateResponse, response_model_by_alias=True,
)
async def update_statuses(service: RallyService = Depends(current_rally_service)):
    """Move every active rally to the status its dates imply."""
    try:
        report = await service.refresh_statuses()
    except DataError as exc:
        logger.error("rally status update failed: %s", exc)
        return _error(500, "Rally status update failed", details=user_message(exc))
    return StatusUpdateResponse(
        updated=report.updated,
        total=report.total,
        updates=[
            StatusUpdate(
                rally_id=c.rally_id,
                name=c.name,
                old_status=c.old_status,
                new_status=c.new_status,
                success=c.succeeded,
                error=c.error,
            )
            for c in report.changes
        ],
        timestamp=report.checked_at,
    )


@rallies_router.get(
    "/update-statuses", response_model=StatusHealthResponse, response_model_by_alias=True,
)
async def status_health(service: RallyService = Depends(current_rally_service)):
    """Latest active rallies with the status they have and the one they should have."""
    try:
        checks = await service.check_statuses(limit=STATUS_SUMMARY_LIMIT)
    except DataError as exc:
        logger.error("rally status health check failed: %s", exc)
        return _error(500, "Health check failed", details=user_message(exc))
    return StatusHealthResponse(
        total_rallies=len(checks),
        rallies_needing_update=sum(1 for c in checks if c.needs_update),
        rallies=[
            RallyStatusSummary(
                id=c.rally_id,
                name=c.name,
                current_status=c.current_status,
                expected_status=c.expected_status,
                needs_update=c.needs_update,
                competition_date=c.competition_date,
                registration_deadline=c.registration_deadline,
            )
            for c in checks
        ],
        timestamp=datetime.now(UTC),
    )
