"""Tests for validate_body and the error envelope, on a minimal app."""
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, field_validator

from src.app.api.error_handlers import register_error_handlers
from src.app.api.validation import format_errors, validate_body
from src.client.schemas import ResetPasswordRequest


class ExplodingRequest(BaseModel):
    value: str

    @field_validator("value")
    @classmethod
    def explode(cls, v: str) -> str:
        if v == "boom":
            raise RuntimeError("validator crashed")
        return v


@pytest.fixture
def calls():
    return []


@pytest_asyncio.fixture
async def hook_client(calls):
    app = FastAPI()
    register_error_handlers(app)

    @app.post("/reset")
    async def reset(request: ResetPasswordRequest = Depends(validate_body(ResetPasswordRequest))):
        calls.append(request)
        return {"success": True}

    @app.post("/explode")
    async def explode(request: ExplodingRequest = Depends(validate_body(ExplodingRequest))):
        calls.append(request)
        return {"success": True}

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_valid_body_reaches_handler(hook_client, calls):
    response = await hook_client.post(
        "/reset", json={"token": "t", "password": "Secret123", "confirmPassword": "Secret123"}
    )

    assert response.status_code == 200
    assert len(calls) == 1
    assert calls[0].password == "Secret123"


@pytest.mark.asyncio
async def test_invalid_body_never_reaches_handler(hook_client, calls):
    response = await hook_client.post(
        "/reset", json={"token": "", "password": "alllowercase1", "confirmPassword": "x"}
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Validation error",
        "details": [
            {"field": "token", "message": "Reset token is required"},
            {
                "field": "password",
                "message": "Password must contain at least one lowercase letter, one uppercase letter, and one number",
            },
            {"field": "confirmPassword", "message": "Passwords don't match"},
        ],
    }
    assert calls == []


@pytest.mark.asyncio
async def test_mismatch_reported_on_confirmation_field_only(hook_client):
    response = await hook_client.post(
        "/reset", json={"token": "t", "password": "Secret123", "confirmPassword": "Secret321"}
    )

    fields = [d["field"] for d in response.json()["details"]]
    assert fields == ["confirmPassword"]


@pytest.mark.asyncio
async def test_empty_body_reports_each_missing_field(hook_client):
    response = await hook_client.post("/reset")

    assert response.status_code == 400
    assert [d["field"] for d in response.json()["details"]] == ["token", "password", "confirmPassword"]


@pytest.mark.asyncio
async def test_non_object_body_is_a_body_level_error(hook_client):
    response = await hook_client.post("/reset", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == ""


@pytest.mark.asyncio
async def test_unexpected_exception_is_not_treated_as_validation(hook_client, calls):
    response = await hook_client.post("/explode", json={"value": "boom"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
    assert calls == []


def test_format_errors_drops_location_prefix_and_joins_path():
    errors = [
        {"loc": ("query", "status"), "msg": "bad status"},
        {"loc": ("items", 0, "name"), "msg": "bad name"},
    ]

    assert format_errors(errors) == [
        {"field": "status", "message": "bad status"},
        {"field": "items.0.name", "message": "bad name"},
    ]
