"""
Exception -> HTTP response mapping

All error bodies have the shape {"error": "<message>"}. Repository
failures answer with an empty message so backend details never leak.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mysubs.domain.errors import (
    DecodeError,
    RepositoryError,
    RequestTimeoutError,
    SubscriptionNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("unmarshal error: %s", exc.errors())
    return error_response(400, "invalid JSON")


async def _bad_request(request: Request, exc: ValueError) -> JSONResponse:
    return error_response(400, str(exc))


async def _not_found(request: Request, exc: SubscriptionNotFoundError) -> JSONResponse:
    return error_response(404, "not found")


async def _timed_out(request: Request, exc: RequestTimeoutError) -> JSONResponse:
    return error_response(504, str(exc))


async def _repository_failed(request: Request, exc: RepositoryError) -> JSONResponse:
    return error_response(500, "")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(DecodeError, _bad_request)
    app.add_exception_handler(ValidationError, _bad_request)
    app.add_exception_handler(SubscriptionNotFoundError, _not_found)
    app.add_exception_handler(RequestTimeoutError, _timed_out)
    app.add_exception_handler(RepositoryError, _repository_failed)
