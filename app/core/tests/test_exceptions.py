"""Tests for error classes and RFC 7807 handlers."""

import json

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.exceptions import (
    BadRequestError,
    ConflictError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ShopError,
    UnauthorizedError,
    register_exception_handlers,
)
from app.core.problem_details import ERROR_TYPES, create_problem_detail


@pytest.mark.parametrize(
    ("exc", "status_code", "code"),
    [
        (NotFoundError(), 404, "NOT_FOUND"),
        (BadRequestError(), 400, "BAD_REQUEST"),
        (ConflictError(), 409, "CONFLICT"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (ForbiddenError(), 403, "FORBIDDEN"),
    ],
)
def test_error_status_and_code(exc: ShopError, status_code: int, code: str):
    assert exc.status_code == status_code
    assert exc.code == code
    assert exc.error_type_uri == ERROR_TYPES[code]


def test_title_derived_from_code():
    assert NotFoundError().title == "Not Found"


def test_problem_detail_falls_back_to_code_uri():
    problem = create_problem_detail(status=418, title="Teapot", error_code="I_AM_A_TEAPOT")

    assert problem.type.endswith("/i-am-a-teapot")
    assert problem.code == "I_AM_A_TEAPOT"


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom() -> None:
        raise exc

    return app


@pytest.mark.asyncio
async def test_shop_error_rendered_as_problem():
    app = _app_raising(ConflictError("Category already exists: Shoes"))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.status_code == 409
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["type"] == ERROR_TYPES["CONFLICT"]
    assert body["title"] == "Conflict"
    assert body["detail"] == "Category already exists: Shoes"
    assert body["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_unhandled_error_hides_message():
    app = _app_raising(RuntimeError("secret internals"))

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.status_code == 500
    assert "secret internals" not in json.dumps(response.json())


@pytest.mark.asyncio
async def test_client_error_details_exposed():
    app = _app_raising(NotFoundError("Products not found: 7, 9", details={"product_ids": [7, 9]}))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.json()["details"] == {"product_ids": [7, 9]}


@pytest.mark.asyncio
async def test_server_error_details_withheld():
    app = _app_raising(DatabaseError("Failed to place order", details={"error": "pool exhausted"}))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/boom")

    assert response.status_code == 500
    assert "details" not in response.json()
