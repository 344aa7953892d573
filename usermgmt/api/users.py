"""User endpoints: listing, registration, login, profile and role updates."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, status
from fastapi.responses import JSONResponse
from pymongo.database import Database

from usermgmt.database.mongo import get_db
from usermgmt.dtos import (
    ErrorResponse,
    LoginResponse,
    MessageResponse,
    UserEnvelope,
    UserListResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserRoleEnvelope,
    UserRoleUpdateRequest,
    UserUpdateRequest,
)
from usermgmt.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


@router.get("", response_model=UserListResponse)
@router.get("/", response_model=UserListResponse, include_in_schema=False)
def list_users(db: Database = Depends(get_db)):
    """List all users. Passwords are never included."""
    service = UserService(db)
    return service.list_users()


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
def register_user(
    payload: UserRegisterRequest | None = Body(default=None),
    db: Database = Depends(get_db),
):
    """Register a new user. The role defaults to "user"."""
    service = UserService(db)
    return service.register(payload or UserRegisterRequest())


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    },
)
def login_user(
    payload: UserLoginRequest | None = Body(default=None),
    db: Database = Depends(get_db),
):
    """Check an email/password pair and return the user's role."""
    service = UserService(db)
    return service.login(payload or UserLoginRequest())


@router.put("/{user_id}", response_model=UserEnvelope, responses=_ERRORS)
def update_user(
    user_id: str = Path(..., description="User id"),
    payload: UserUpdateRequest | None = Body(default=None),
    db: Database = Depends(get_db),
):
    """Update any of name, email, phone and password. Empty values are ignored."""
    service = UserService(db)
    return service.update_user(user_id, payload or UserUpdateRequest())


@router.patch("/{user_id}/role", response_model=UserRoleEnvelope, responses=_ERRORS)
def update_user_role(
    user_id: str = Path(..., description="User id"),
    payload: UserRoleUpdateRequest | None = Body(default=None),
    db: Database = Depends(get_db),
):
    """Set the role to "user" or "admin"."""
    service = UserService(db)
    result = service.update_role(user_id, payload or UserRoleUpdateRequest())
    if isinstance(result, ErrorResponse):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=result.model_dump()
        )
    return result


@router.delete("/{user_id}", response_model=MessageResponse, responses=_ERRORS)
def delete_user(
    user_id: str = Path(..., description="User id"),
    db: Database = Depends(get_db),
):
    """Delete a user permanently."""
    service = UserService(db)
    return service.delete_user(user_id)
