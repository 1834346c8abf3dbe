"""
HTTP error mapping

The only place where errors become HTTP status codes. Mapping is by
ErrorKind tag:

    validation / invariant / duplicate -> 400
    not_found                          -> 404
    conflict                           -> 409
    infrastructure                     -> 503
    anything else                      -> 500 (generic body, logged with traceback)

Every error body carries the correlation id of the request.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.core.context import new_correlation_id, reset_correlation_id, set_correlation_id
from storefront.domain.exceptions import DomainError, ErrorKind
from storefront.repositories.errors import InfrastructureError
from storefront.services.errors import ApplicationError


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVARIANT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INFRASTRUCTURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(status_code: int, error: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "error": error})


def _correlation_id(request: Request, fallback: Optional[str] = None) -> Optional[str]:
    return getattr(request.state, "correlation_id", None) or fallback


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Assign a correlation id to every request and catch unexpected failures

    The id comes from the X-Request-ID header when present and is echoed
    back on the response.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or new_correlation_id()
        request.state.correlation_id = correlation_id
        token = set_correlation_id(correlation_id)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"Unexpected error on {request.method} {request.url.path} "
                f"(correlation_id={correlation_id})"
            )
            response = error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {
                    "kind": "unexpected",
                    "code": "internal_error",
                    "message": "Internal server error",
                    "operation": None,
                    "correlation_id": correlation_id,
                }
            )
        finally:
            reset_correlation_id(token)

        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    error = exc.to_dict()
    error["correlation_id"] = _correlation_id(request, exc.correlation_id)
    return error_response(status_for(exc.kind), error)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.warning(f"Untranslated domain error on {request.url.path}: {exc!r}")
    return error_response(
        status_for(exc.kind),
        {
            "kind": exc.kind.value,
            "code": exc.code,
            "message": exc.message,
            "operation": None,
            "details": exc.details,
            "correlation_id": _correlation_id(request),
        }
    )


async def infrastructure_error_handler(request: Request, exc: InfrastructureError) -> JSONResponse:
    error = exc.to_dict()
    error["correlation_id"] = _correlation_id(request, exc.correlation_id)
    logger.error(f"{exc.operation} unavailable (correlation_id={error['correlation_id']})")
    return error_response(status_for(exc.kind), error)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        {
            "kind": ErrorKind.VALIDATION.value,
            "code": "invalid_request",
            "message": "Request validation failed",
            "operation": None,
            "details": {"errors": errors},
            "correlation_id": _correlation_id(request),
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(InfrastructureError, infrastructure_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
