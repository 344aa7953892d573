"""User account service using repository pattern"""

import logging
from typing import Union

from pymongo.database import Database

from usermgmt.core.exceptions import AuthError, ConflictError, InputError, NotFoundError
from usermgmt.core.security import burn_verification, verify_password
from usermgmt.core.validation import (
    ROLE_MESSAGE,
    is_valid_role,
    normalize_email,
    parse_user_id,
    require_fields,
)
from usermgmt.dtos import (
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
from usermgmt.models.user import DEFAULT_ROLE, User
from usermgmt.repositories.user import UserRepository

logger = logging.getLogger(__name__)

REGISTER_FIELDS = ("name", "email", "phone", "password")
LOGIN_FIELDS = ("email", "password")

REGISTER_REQUIRED_MESSAGE = "name, email, phone and password are required"
LOGIN_REQUIRED_MESSAGE = "Email and password required"
EMAIL_TAKEN_MESSAGE = "Email already registered"
# Same text for unknown email and wrong password
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
NOT_FOUND_MESSAGE = "User not found"


def _public(user: User) -> UserResponse:
    return UserResponse.model_validate(user.model_dump(by_alias=True))


class UserService:
    def __init__(self, db: Database):
        self.db = db
        self.user_repo = UserRepository(db)

    def list_users(self) -> UserListResponse:
        """List all users"""
        users = self.user_repo.list_all()
        return UserListResponse(
            users=[
                UserSummaryResponse.model_validate(user.model_dump(by_alias=True))
                for user in users
            ]
        )

    def register(self, payload: UserRegisterRequest) -> UserEnvelope:
        require_fields(payload.model_dump(), REGISTER_FIELDS, REGISTER_REQUIRED_MESSAGE)

        # Fast path only; the unique index is what actually guards the email
        email = normalize_email(payload.email)
        if email and self.user_repo.find_by_email(email):
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        user = User(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            role=payload.role or DEFAULT_ROLE,
        ).set_password(payload.password)
        created = self.user_repo.insert(user)

        logger.info("User registered", extra={"user_id": str(created.id)})
        return UserEnvelope(
            message="User registered successfully", user=_public(created)
        )

    def login(self, payload: UserLoginRequest) -> LoginResponse:
        require_fields(payload.model_dump(), LOGIN_FIELDS, LOGIN_REQUIRED_MESSAGE)

        user = self.user_repo.find_credentials_by_email(normalize_email(payload.email))
        if user is None:
            burn_verification(payload.password, self.user_repo.hash_rounds)
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(payload.password, user.password):
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return LoginResponse(message="Login successful", role=user.role)

    def update_user(self, user_id: str, payload: UserUpdateRequest) -> UserEnvelope:
        """Apply the non-empty fields of the payload to an existing user."""
        user = self._get_for_update(user_id)

        email = normalize_email(payload.email)
        if email and email != user.email:
            if self.user_repo.find_by_email(email):
                raise ConflictError(EMAIL_TAKEN_MESSAGE)
            user.email = email

        if payload.name:
            user.name = payload.name
        if payload.phone:
            user.phone = payload.phone
        if payload.password:
            user.set_password(payload.password)

        updated = self.user_repo.update(user)
        return UserEnvelope(message="User updated", user=_public(updated))

    def update_role(
        self, user_id: str, payload: UserRoleUpdateRequest
    ) -> Union[UserRoleEnvelope, ErrorResponse]:
        """Change a user's role.

        Asking for the role the user already has changes nothing and yields
        an ErrorResponse, which the route sends with status 400.
        """
        role = payload.role
        if not is_valid_role(role):
            raise InputError(ROLE_MESSAGE)

        user = self._get_for_update(user_id)
        if user.role == role:
            return ErrorResponse(message=f"User is already a {role}")

        user.role = role
        updated = self.user_repo.update(user)
        logger.info(
            "User role changed", extra={"user_id": str(updated.id), "role": role}
        )
        return UserRoleEnvelope(
            message="Role updated",
            user=UserRoleResponse(id=str(updated.id), role=updated.role),
        )

    def delete_user(self, user_id: str) -> MessageResponse:
        object_id = parse_user_id(user_id)
        deleted = self.user_repo.delete_by_id(object_id)
        if deleted is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        logger.info("User deleted", extra={"user_id": user_id})
        return MessageResponse(message="User deleted successfully")

    def _get_for_update(self, user_id: str) -> User:
        object_id = parse_user_id(user_id)
        # The full document is needed so the save can re-validate it
        user = self.user_repo.find_by_id(object_id, projection=None)
        if user is None:
            raise NotFoundError(NOT_FOUND_MESSAGE)
        return user
