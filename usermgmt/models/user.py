"""User entity - represents a user account in the database"""

from typing import Literal, Optional

from pydantic import PrivateAttr

from .base import BaseEntity

Role = Literal["user", "admin"]
ROLES = ("user", "admin")
DEFAULT_ROLE = "user"


class User(BaseEntity):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    # bcrypt digest once persisted; plaintext only while password_modified is set
    password: Optional[str] = None
    role: str = DEFAULT_ROLE

    _password_modified: bool = PrivateAttr(default=False)

    @property
    def password_modified(self) -> bool:
        return self._password_modified

    def set_password(self, password: str) -> "User":
        """Replace the password; it is hashed on the next save."""
        self.password = password
        self._password_modified = True
        return self

    def mark_password_hashed(self, digest: str) -> "User":
        self.password = digest
        self._password_modified = False
        return self

    def without_password(self) -> "User":
        return self.model_copy(update={"password": None})
