import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database import StorageError
from app.schemas.response import ApiResponse, FieldError, field_errors_from
from app.services.product_repository import ProductValidationError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: list[FieldError] | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    """Build a JSON error response in the standard envelope."""
    body = ApiResponse(success=False, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = field_errors_from(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {len(errors)} invalid field(s)")
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request data", errors)


async def product_validation_handler(request: Request, exc: ProductValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid product data", exc.errors)


async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage error, the operation was not completed")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to the response envelope.

    - HTTP errors (404, 405, ...) keep their status code
    - Request validation failures become 400 with a list of field errors
    - Storage failures and anything unexpected become 500
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ProductValidationError, product_validation_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
