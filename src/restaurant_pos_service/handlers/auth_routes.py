"""Authentication and user management endpoints under /api/auth."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from restaurant_pos_service.handlers.dependencies import get_identity_service
from restaurant_pos_service.handlers.responses import success_response
from restaurant_pos_service.models.user_models import UserPatch, UserRole
from restaurant_pos_service.services.identity_service import IdentityService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: UserRole | None = None


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    role: UserRole


@router.post("/login")
async def login(
    body: LoginRequest, identity: IdentityService = Depends(get_identity_service)
) -> JSONResponse:
    """Validate credentials and return the user with a fresh token.

    The token is not stored; later requests do not check it.
    """
    result = await identity.validate_login(body.username, body.password, body.role)
    return success_response(user=result.user.public_view(), token=result.token)


@router.post("/register")
async def register(
    body: RegisterRequest, identity: IdentityService = Depends(get_identity_service)
) -> JSONResponse:
    user = await identity.create_user(body.username, body.password, body.name, body.role)
    return success_response(status_code=201, user=user.public_view())


@router.post("/seed")
async def seed_users(identity: IdentityService = Depends(get_identity_service)) -> JSONResponse:
    created = await identity.seed_default_users()
    return success_response(message="Default users seeded successfully", created=created)


@router.get("/users")
async def list_users(identity: IdentityService = Depends(get_identity_service)) -> JSONResponse:
    users = await identity.get_all_users()
    return success_response(data=[user.public_view() for user in users])


@router.put("/users/{user_id}")
async def update_user(
    user_id: str, patch: UserPatch, identity: IdentityService = Depends(get_identity_service)
) -> JSONResponse:
    user = await identity.update_user(user_id, patch)
    return success_response(user=user.public_view())


@router.delete("/users/{user_id}")
async def deactivate_user(
    user_id: str, identity: IdentityService = Depends(get_identity_service)
) -> JSONResponse:
    """Deactivate a user. Accounts are never hard-deleted."""
    await identity.deactivate_user(user_id)
    return success_response(message="User deactivated successfully")
