"""Mongo User Repository — the five driver calls behind UserRepository.

Invariants:
    - One driver call per operation; no filtering, sorting or pagination
    - Path ids are cast to ObjectId before reaching the driver; a bad id raises
      InvalidUserIdError, never a driver error
    - Driver exceptions are mapped to core/errors.py; nothing from pymongo escapes
    - Records leave as dicts with "_id" rendered as its hex string
"""

import logging
from contextlib import contextmanager
from typing import Any

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId, InvalidStringData
from pymongo.errors import (
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
)

from user_api.core.domain_types import StoreOperation, UserId
from user_api.core.errors import (
    DatabaseError,
    ErrorContext,
    InvalidUserIdError,
    UserValidationError,
)

logger = logging.getLogger(__name__)

# Server error code for a document rejected by the collection validator
DOCUMENT_VALIDATION_FAILURE = 121


def parse_user_id(user_id: str) -> ObjectId:
    """Cast a path id to ObjectId or raise InvalidUserIdError."""
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        raise InvalidUserIdError(user_id)


def serialize_user(document: dict) -> dict:
    """Store document -> API record."""
    record = dict(document)
    record["_id"] = str(record["_id"])
    return record


@contextmanager
def store_errors(operation: StoreOperation, user_id: str | None = None):
    """Map driver exceptions raised inside the block to core errors."""
    ctx = ErrorContext(user_id=user_id, operation=operation.value)
    try:
        yield
    except (OverflowError, InvalidDocument, InvalidStringData) as e:
        logger.warning(f"Document cannot be encoded as BSON: {e}")
        raise UserValidationError("Document cannot be stored", context=ctx)
    except ConnectionFailure as e:
        logger.error(f"Store connection failure: {e}")
        raise DatabaseError("Document store unavailable", operation.value, ctx)
    except OperationFailure as e:
        if e.code == DOCUMENT_VALIDATION_FAILURE:
            logger.warning(f"Store rejected document: {e}")
            raise UserValidationError("Document failed store validation", context=ctx)
        logger.error(f"Store operation failure: {e}")
        raise DatabaseError("Document store rejected the operation", operation.value, ctx)
    except PyMongoError as e:
        logger.error(f"Store driver error: {e}")
        raise DatabaseError("Document store error", operation.value, ctx)


class MongoUserRepository:
    """UserRepository over a pymongo AsyncCollection."""

    def __init__(self, collection):
        self._collection = collection

    async def insert(self, data: dict[str, Any]) -> dict:
        document = dict(data)
        with store_errors(StoreOperation.INSERT):
            result = await self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(
            "User created", extra={"user_id": str(result.inserted_id)},
        )
        return serialize_user(document)

    async def find_all(self) -> list[dict]:
        with store_errors(StoreOperation.FIND):
            documents = await self._collection.find({}).to_list()
        return [serialize_user(d) for d in documents]

    async def find_by_id(self, user_id: UserId) -> dict | None:
        oid = parse_user_id(user_id)
        with store_errors(StoreOperation.FIND, user_id):
            document = await self._collection.find_one({"_id": oid})
        return serialize_user(document) if document is not None else None

    async def delete_by_id(self, user_id: UserId) -> dict:
        oid = parse_user_id(user_id)
        with store_errors(StoreOperation.DELETE, user_id):
            result = await self._collection.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info("User deleted", extra={"user_id": user_id})
        return {
            "acknowledged": result.acknowledged,
            "deletedCount": result.deleted_count,
        }

    async def update_by_id(
        self, user_id: UserId, fields: dict[str, Any],
    ) -> dict:
        oid = parse_user_id(user_id)
        if not fields:
            # An empty $set is rejected by the server; report matches only
            with store_errors(StoreOperation.FIND, user_id):
                matched = await self._collection.count_documents({"_id": oid})
            return {
                "acknowledged": True,
                "matchedCount": matched,
                "modifiedCount": 0,
                "upsertedId": None,
                "upsertedCount": 0,
            }
        with store_errors(StoreOperation.UPDATE, user_id):
            result = await self._collection.update_one(
                {"_id": oid}, {"$set": fields},
            )
        return {
            "acknowledged": result.acknowledged,
            "matchedCount": result.matched_count,
            "modifiedCount": result.modified_count,
            "upsertedId": (
                str(result.upserted_id) if result.upserted_id is not None else None
            ),
            "upsertedCount": 1 if result.upserted_id is not None else 0,
        }
