"""User request and response DTOs"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from usermgmt.models.base import PyObjectIdStr
from usermgmt.models.user import Role


class UserRegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class UserLoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class UserRoleUpdateRequest(BaseModel):
    role: Optional[str] = None


class UserResponse(BaseModel):
    """Public projection of a user; never carries the password."""

    id: PyObjectIdStr = Field(..., validation_alias=AliasChoices("_id", "id"))
    name: str
    email: str
    phone: str
    role: Role = "user"

    model_config = ConfigDict(populate_by_name=True)


class UserSummaryResponse(UserResponse):
    created_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )


class UserRoleResponse(BaseModel):
    id: PyObjectIdStr = Field(..., validation_alias=AliasChoices("_id", "id"))
    role: Role

    model_config = ConfigDict(populate_by_name=True)


class UserListResponse(BaseModel):
    success: bool = True
    users: List[UserSummaryResponse]


class UserEnvelope(BaseModel):
    success: bool = True
    message: str
    user: UserResponse


class UserRoleEnvelope(BaseModel):
    success: bool = True
    message: str
    user: UserRoleResponse


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    role: Role


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
