"""User repository for database operations"""

import logging
from typing import Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.database import Database

from usermgmt.config import settings
from usermgmt.core.security import hash_password
from usermgmt.core.validation import validate_user_document
from usermgmt.models.user import User
from .base import BaseRepository, Projection

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
# Reads that feed responses never load the digest
PUBLIC_PROJECTION: Dict[str, int] = {"password": 0}


class UserRepository(BaseRepository[User]):
    """Repository for user entities"""

    def __init__(self, db: Database, hash_rounds: Optional[int] = None):
        super().__init__(db, USERS_COLLECTION, User)
        self.hash_rounds = hash_rounds or settings.SALT_ROUNDS

    def ensure_indexes(self) -> None:
        """Unique email index; closes the race between concurrent registrations"""
        self.collection.create_index([("email", ASCENDING)], unique=True)

    def list_all(self) -> List[User]:
        """List all users without their password"""
        return self.find_many({}, PUBLIC_PROJECTION)

    def find_by_id(
        self, entity_id: str | ObjectId, projection: Projection = PUBLIC_PROJECTION
    ) -> Optional[User]:
        return super().find_by_id(entity_id, projection)

    def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by (normalised) email"""
        return self.find_one({"email": email}, PUBLIC_PROJECTION)

    def find_credentials_by_email(self, email: str) -> Optional[User]:
        """Find a user by email including the password digest"""
        return self.find_one({"email": email})

    def insert(self, user: User) -> User:
        """Validate, hash and insert a new user.

        A colliding email raises pymongo's DuplicateKeyError from the index.
        """
        document = self._prepare(user.mark_created())
        created = self.insert_one(document)
        return created.without_password()

    def update(self, user: User) -> User:
        """Validate and persist every field of an existing user"""
        document = self._prepare(user.mark_updated())
        changes = {
            key: value
            for key, value in document.items()
            if key not in ("_id", "created_at")
        }
        self.update_one(user.id, changes)
        return self._to_model(document).without_password()

    def delete_by_id(self, entity_id: str | ObjectId) -> Optional[User]:
        """Find-and-delete in one round trip"""
        return super().delete_by_id(entity_id, PUBLIC_PROJECTION)

    def _prepare(self, user: User) -> dict:
        document = validate_user_document(user.to_mongo())
        if user.password_modified:
            digest = hash_password(document["password"], self.hash_rounds)
            user.mark_password_hashed(digest)
            document["password"] = digest
            logger.debug("Password hashed", extra={"user_id": str(user.id)})
        return document
