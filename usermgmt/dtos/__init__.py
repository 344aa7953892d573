"""Data Transfer Objects (DTOs) for API requests and responses"""

from .user import (
    ErrorResponse,
    LoginResponse,
    MessageResponse,
    UserEnvelope,
    UserListResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
    UserRoleEnvelope,
    UserRoleResponse,
    UserRoleUpdateRequest,
    UserSummaryResponse,
    UserUpdateRequest,
)

__all__ = [
    "ErrorResponse",
    "LoginResponse",
    "MessageResponse",
    "UserEnvelope",
    "UserListResponse",
    "UserLoginRequest",
    "UserRegisterRequest",
    "UserResponse",
    "UserRoleEnvelope",
    "UserRoleResponse",
    "UserRoleUpdateRequest",
    "UserSummaryResponse",
    "UserUpdateRequest",
]
