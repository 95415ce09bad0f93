"""User Repository — the five persistence operations on the users collection.

Invariants:
    - create/update run check_user_fields on the full candidate record; nothing is written on failure
    - Malformed ids raise InvalidRecordIdError before the store is touched
    - createdAt == updatedAt on create; updatedAt strictly increases on every update
    - Concurrent updates to one id are last-write-wins (no locking, no versioning)
    - PyMongoError never escapes: it is logged and re-raised as DatabaseError
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Mapping

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from directory_api.core.errors import (
    DatabaseError, ErrorContext, InvalidRecordIdError, RecordNotFoundError,
    RecordValidationError,
)
from directory_api.core.timestamps import next_timestamp
from directory_api.core.user_rules import (
    check_user_fields, normalize_user_fields, pick_user_fields,
)
from directory_api.infrastructure.database import get_users_collection
from directory_api.schemas.user import UserRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_record_id(record_id: str) -> ObjectId:
    """Store id for a path parameter, or InvalidRecordIdError."""
    if not isinstance(record_id, str) or not ObjectId.is_valid(record_id):
        raise InvalidRecordIdError(str(record_id))
    return ObjectId(record_id)


@asynccontextmanager
async def _store_errors(operation: str, record_id: str | None = None) -> AsyncIterator[None]:
    try:
        yield
    except PyMongoError as e:
        logger.error(
            f"Store {operation} failed: {e}",
            extra={"operation": operation, "record_id": record_id},
            exc_info=True,
        )
        raise DatabaseError(
            "document store error", operation,
            ErrorContext(record_id=record_id),
        ) from e


class UserRepository:
    """Persistence access for user records, delegated to the motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection, clock: Clock = _utc_now):
        self._collection = collection
        self._clock = clock

    async def list_all(self) -> list[UserRecord]:
        """All records in natural storage order."""
        async with _store_errors("list"):
            docs = await self._collection.find({}).to_list(length=None)
        return [UserRecord.from_document(doc) for doc in docs]

    async def get_by_id(self, record_id: str) -> UserRecord:
        oid = parse_record_id(record_id)
        async with _store_errors("get", record_id):
            doc = await self._collection.find_one({"_id": oid})
        if doc is None:
            raise RecordNotFoundError(record_id)
        return UserRecord.from_document(doc)

    async def create(self, fields: Mapping[str, Any]) -> UserRecord:
        candidate = pick_user_fields(fields)
        violations = check_user_fields(candidate)
        if violations:
            raise RecordValidationError(violations)

        now = next_timestamp(None, self._clock())
        doc = {**normalize_user_fields(candidate), "createdAt": now, "updatedAt": now}
        async with _store_errors("insert"):
            result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("User created", extra={"record_id": str(result.inserted_id)})
        return UserRecord.from_document(doc)

    async def update(self, record_id: str, changes: Mapping[str, Any]) -> UserRecord:
        """Merge a full or partial set of fields over the stored record."""
        oid = parse_record_id(record_id)
        async with _store_errors("get", record_id):
            existing = await self._collection.find_one({"_id": oid})
        if existing is None:
            raise RecordNotFoundError(record_id)

        merged = {**pick_user_fields(existing), **pick_user_fields(changes)}
        violations = check_user_fields(merged)
        if violations:
            raise RecordValidationError(
                violations, ErrorContext(record_id=record_id),
            )

        updated_at = next_timestamp(existing.get("updatedAt"), self._clock())
        async with _store_errors("update", record_id):
            doc = await self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": {**normalize_user_fields(merged), "updatedAt": updated_at}},
                return_document=ReturnDocument.AFTER,
            )
        # Deleted between the read and the write
        if doc is None:
            raise RecordNotFoundError(record_id)
        logger.info("User updated", extra={"record_id": record_id})
        return UserRecord.from_document(doc)

    async def delete(self, record_id: str) -> None:
        oid = parse_record_id(record_id)
        async with _store_errors("delete", record_id):
            result = await self._collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise RecordNotFoundError(record_id)
        logger.info("User deleted", extra={"record_id": record_id})


def get_user_repository(
    collection: AsyncIOMotorCollection = Depends(get_users_collection),
) -> UserRepository:
    """FastAPI dependency for the user repository."""
    return UserRepository(collection)
