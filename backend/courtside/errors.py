"""Problem-document error envelope for every error the API returns."""

from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional, Tuple

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import HTTP_422_UNPROCESSABLE, DomainException, RepositoryException

PROBLEM_MEDIA_TYPE = "application/problem+json"


def problem_response(
    request: Request,
    status_code: int,
    detail: Optional[str] = None,
    *,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """
    Build an ``application/problem+json`` response.

    ``code`` carries the machine-readable error code and ``errors`` any
    structured details (availability results, field errors).
    """
    try:
        title = HTTPStatus(status_code).phrase
    except ValueError:
        title = "Error"

    body: Dict[str, Any] = {
        "type": "about:blank",
        "title": title,
        "status": status_code,
        "detail": detail or "",
        "instance": request.url.path,
    }
    if code:
        body["code"] = code
    if errors is not None:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(
        body, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers
    )


def _split_detail(detail: Any) -> Tuple[Optional[str], Optional[str], Optional[Any]]:
    """Pull (message, code, errors) out of an HTTPException detail."""
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("detail")
        code = detail.get("code")
        return (
            message if isinstance(message, str) else None,
            code if isinstance(code, str) else None,
            detail.get("details") or detail.get("errors"),
        )
    if detail is None:
        return None, None, None
    return str(detail), None, None


def _from_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message, code, errors = _split_detail(exc.detail)
    return problem_response(
        request,
        exc.status_code,
        message,
        code=code,
        errors=errors,
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    # fastapi.HTTPException subclasses the Starlette one, so one handler covers both
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _from_http_exception(request, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        return _from_http_exception(request, exc.to_http_exception())

    @app.exception_handler(RepositoryException)
    async def repository_exception_handler(
        request: Request, exc: RepositoryException
    ) -> JSONResponse:
        return problem_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Booking store is unavailable",
            code="STORE_FAULT",
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return problem_response(
            request,
            HTTP_422_UNPROCESSABLE,
            "Request validation failed",
            code="validation_error",
            errors=exc.errors(),
        )
