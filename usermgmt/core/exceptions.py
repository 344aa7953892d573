from typing import Dict, List

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class SchemaValidationError(AppError):
    """Document failed schema validation; ``errors`` maps field to message."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(", ".join(self.errors.values()))

    @property
    def messages(self) -> List[str]:
        return list(self.errors.values())


class DatabaseConnectionError(Exception):
    pass
