"""Response envelopes and exception handlers for the POS API.

Every response body is ``{"success": bool, "data" | "error": ..., ...}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_pos_service.errors import PosServiceError

logger = logging.getLogger(__name__)


def serialize(value: Any) -> Any:
    """Convert models (and lists/dicts of them) to JSON-ready camelCase data.

    Decimals become ints or floats rather than strings.
    """
    if isinstance(value, BaseModel):
        return jsonable_encoder(value.model_dump(by_alias=True))
    if isinstance(value, list):
        return [serialize(entry) for entry in value]
    if isinstance(value, dict):
        return {key: serialize(entry) for key, entry in value.items()}
    return jsonable_encoder(value)


def success_response(status_code: int = 200, **fields: Any) -> JSONResponse:
    """Build a success envelope from keyword fields."""
    content: dict[str, Any] = {"success": True}
    content.update({key: serialize(value) for key, value in fields.items()})
    return JSONResponse(status_code=status_code, content=content)


def list_response(items: list[Any]) -> JSONResponse:
    return success_response(count=len(items), data=items)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(messages) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Map service failures and framework errors onto the error envelope."""

    @app.exception_handler(PosServiceError)
    async def handle_service_error(request: Request, exc: PosServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return error_response(exc.status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(400, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return error_response(404, "Endpoint not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, str(exc) or "Internal server error")
