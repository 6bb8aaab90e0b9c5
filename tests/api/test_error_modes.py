"""Error Modes — the same structured errors rendered as compat 200 bodies or strict statuses.

Invariants:
    - compat: every failure is HTTP 200 with {"message": {"name", "code", "message"}},
      "name" being the error name older clients branch on (ValidationError, CastError)
    - compat: get-by-id miss is HTTP 200 null
    - strict: 400 validation / bad id, 404 missing record, 500 store failure
    - Driver exceptions never leak their text into the response
"""

from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import (
    OperationFailure,
    ServerSelectionTimeoutError,
    WriteError,
)

from user_api.infrastructure.database import get_user_repository
from user_api.main import app


# --- compat mode --------------------------------------------------------------

async def test_compat_missing_field_is_200_with_message(client):
    res = await client.post("/api/users", json={"name": "Paula Builes", "age": 20})

    assert res.status_code == 200
    message = res.json()["message"]
    assert message["name"] == "ValidationError"
    assert message["code"] == "VALIDATION_ERROR"
    assert "email is required" in message["message"]
    assert message["details"][0]["field"] == "body.email"


async def test_compat_invalid_id_is_200_with_message(client):
    res = await client.get("/api/users/not-an-object-id")

    assert res.status_code == 200
    assert res.json()["message"]["name"] == "CastError"
    assert res.json()["message"]["code"] == "INVALID_USER_ID"


async def test_compat_invalid_id_on_delete(client, collection):
    res = await client.delete("/api/users/123")

    assert res.status_code == 200
    assert res.json()["message"]["name"] == "CastError"
    assert "delete_one" not in collection.calls


async def test_compat_store_down_is_200_with_message(client, collection):
    collection.fail_with = ServerSelectionTimeoutError("localhost:27017: connection refused")

    res = await client.get("/api/users")

    assert res.status_code == 200
    message = res.json()["message"]
    assert message["name"] == "MongoServerError"
    assert message["code"] == "DATABASE_ERROR"
    assert "connection refused" not in message["message"]


# --- strict mode --------------------------------------------------------------

async def test_strict_missing_field_is_400(strict_client):
    res = await strict_client.post("/api/users", json={"name": "Paula Builes"})

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    fields = {d["field"] for d in error["details"]}
    assert fields == {"body.age", "body.email"}


async def test_strict_ill_typed_age_is_400(strict_client):
    res = await strict_client.post(
        "/api/users", json={"name": "A", "age": "veinte", "email": "a@b.c"},
    )

    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Invalid request data"


async def test_strict_missing_user_is_404(strict_client):
    missing = str(ObjectId())

    res = await strict_client.get(f"/api/users/{missing}")

    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["context"]["user_id"] == missing


async def test_strict_invalid_id_is_400(strict_client):
    res = await strict_client.put("/api/users/xyz", json={"age": 3})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_USER_ID"


async def test_strict_store_down_is_500(strict_client, collection):
    collection.fail_with = ServerSelectionTimeoutError("no servers")

    res = await strict_client.post(
        "/api/users", json={"name": "A", "age": 1, "email": "a@b.c"},
    )

    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert error["context"]["operation"] == "insert"


async def test_strict_store_rejects_document_is_400(strict_client, collection):
    collection.fail_with = WriteError(
        "Document failed validation", 121, {"code": 121, "errmsg": "Document failed validation"},
    )

    res = await strict_client.post(
        "/api/users", json={"name": "A", "age": 1, "email": "a@b.c"},
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_strict_operation_failure_is_500(strict_client, collection):
    collection.fail_with = OperationFailure("not authorized on users")

    res = await strict_client.delete(f"/api/users/{ObjectId()}")

    assert res.status_code == 500
    assert "not authorized" not in res.json()["error"]["message"]


async def test_strict_delete_missing_user_still_200(strict_client):
    res = await strict_client.delete(f"/api/users/{ObjectId()}")

    assert res.status_code == 200
    assert res.json()["deletedCount"] == 0


async def test_store_not_initialized_is_database_error(strict_client):
    app.dependency_overrides.pop(get_user_repository)

    res = await strict_client.get("/api/users")

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "DATABASE_ERROR"


async def test_unexpected_exception_does_not_leak(strict_client, collection):
    collection.fail_with = RuntimeError("secret internals")

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        res = await c.get("/api/users")

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "secret" not in res.text


async def test_strict_other_write_error_is_500(strict_client, collection):
    collection.fail_with = WriteError("E11000 duplicate key", 11000, {"code": 11000})

    res = await strict_client.post(
        "/api/users", json={"name": "A", "age": 1, "email": "a@b.c"},
    )

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "DATABASE_ERROR"


async def test_strict_age_beyond_64_bits_is_400(strict_client, collection):
    res = await strict_client.post(
        "/api/users", json={"name": "A", "age": 2**64, "email": "a@b.c"},
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert collection.documents == {}


async def test_compat_age_beyond_64_bits_is_200_with_message(client):
    res = await client.post(
        "/api/users", json={"name": "A", "age": 2**64, "email": "a@b.c"},
    )

    assert res.status_code == 200
    assert res.json()["message"]["name"] == "ValidationError"
