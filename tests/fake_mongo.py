"""In-memory stand-in for the few pymongo calls the user repository makes.

Only equality filters and exclusion projections are supported. Unique
indexes are honoured and violations raise pymongo's DuplicateKeyError with
the same ``details`` shape the server sends.
"""

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError


class FakeCollection:
    def __init__(self, name: str, db_name: str = "test"):
        self.name = name
        self.full_name = f"{db_name}.{name}"
        self.docs: List[Dict[str, Any]] = []
        self.unique_fields: List[str] = []

    def create_index(self, keys, unique: bool = False, **kwargs):
        if isinstance(keys, str):
            keys = [(keys, 1)]
        field = keys[0][0]
        if unique and field not in self.unique_fields:
            self.unique_fields.append(field)
        return f"{field}_1"

    def find_one(self, filter=None, projection=None):
        for doc in self.docs:
            if self._matches(doc, filter):
                return self._project(doc, projection)
        return None

    def find(self, filter=None, projection=None):
        return [
            self._project(doc, projection)
            for doc in self.docs
            if self._matches(doc, filter)
        ]

    def insert_one(self, document):
        if "_id" not in document:
            document["_id"] = ObjectId()
        self._check_unique(document)
        self.docs.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    def update_one(self, filter, update):
        for index, doc in enumerate(self.docs):
            if self._matches(doc, filter):
                candidate = {**doc, **copy.deepcopy(update.get("$set", {}))}
                self._check_unique(candidate, exclude_id=doc["_id"])
                self.docs[index] = candidate
                return SimpleNamespace(
                    matched_count=1, modified_count=int(candidate != doc)
                )
        return SimpleNamespace(matched_count=0, modified_count=0)

    def find_one_and_delete(self, filter, projection=None):
        for index, doc in enumerate(self.docs):
            if self._matches(doc, filter):
                del self.docs[index]
                return self._project(doc, projection)
        return None

    def count_documents(self, filter):
        return sum(1 for doc in self.docs if self._matches(doc, filter))

    def _check_unique(self, candidate, exclude_id=None):
        for field in self.unique_fields:
            value = candidate.get(field)
            for other in self.docs:
                if other["_id"] == exclude_id:
                    continue
                if other.get(field) == value:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.full_name} "
                        f"index: {field}_1 dup key: {{ {field}: {value!r} }}",
                        11000,
                        {
                            "index": 0,
                            "code": 11000,
                            "keyPattern": {field: 1},
                            "keyValue": {field: value},
                        },
                    )

    @staticmethod
    def _matches(doc, filter: Optional[Dict[str, Any]]) -> bool:
        return all(doc.get(key) == value for key, value in (filter or {}).items())

    @staticmethod
    def _project(doc, projection):
        result = copy.deepcopy(doc)
        for key, include in (projection or {}).items():
            if not include:
                result.pop(key, None)
        return result


class FakeDatabase:
    def __init__(self, name: str = "test"):
        self.name = name
        self._collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name, self.name)
        return self._collections[name]

    def __getattr__(self, name: str) -> FakeCollection:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def command(self, name: str):
        return {"ok": 1.0}
