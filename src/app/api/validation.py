"""
Request body validation hook.

``validate_body(schema)`` is registered per route as a FastAPI dependency. It
parses the JSON body with the given pydantic schema and, on failure, stops the
request with a ``RequestBodyInvalid`` that the error handlers render as HTTP 400.
"""
import json
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

TModel = TypeVar("TModel", bound=BaseModel)

LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


class RequestBodyInvalid(Exception):
    """Raised when a request body violates its schema."""

    def __init__(self, details: list[dict[str, str]]):
        super().__init__(f"Request failed validation with {len(details)} error(s)")
        self.details = details


def format_errors(errors: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    """
    Flatten pydantic error dicts into ``{field, message}`` pairs, keeping their order.

    FastAPI prefixes locations with where the value came from (``body``,
    ``query``...); that prefix is dropped so ``field`` is the path inside it.
    """
    details = []
    for error in errors:
        location = list(error.get("loc", ()))
        if location and location[0] in LOCATION_PREFIXES:
            location = location[1:]
        details.append({
            "field": ".".join(str(part) for part in location),
            "message": error["msg"],
        })
    return details


def validate_body(schema: type[TModel]) -> Callable[[Request], Awaitable[TModel]]:
    """Build a dependency that validates the request body against ``schema``."""

    async def dependency(request: Request) -> TModel:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw else {}
        except ValueError:
            raise RequestBodyInvalid([{"field": "body", "message": "Request body must be valid JSON"}])

        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            raise RequestBodyInvalid(format_errors(e.errors())) from e

    dependency.__name__ = f"validate_{schema.__name__}"
    return dependency
