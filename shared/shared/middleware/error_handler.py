import logging
from collections.abc import Awaitable, Callable, Mapping

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Fallback codes for plain HTTPExceptions raised without a domain ``code``.
_STATUS_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHENTICATED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_429_TOO_MANY_REQUESTS: "RATE_LIMITED",
}


def _envelope(request: Request, code: str, message: str, **extra) -> dict:
    error = {"code": code, "message": message, **extra}
    return {
        "error": error,
        "request_id": getattr(request.state, "request_id", None),
    }


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render any HTTPException as the standard error envelope.

    Domain exceptions carry a stable ``code`` attribute; clients branch on it,
    never on the message text.
    """
    code = getattr(exc, "code", None) or _STATUS_CODES.get(exc.status_code, "http_error")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(request, code, message),
        headers=getattr(exc, "headers", None),
    )


def make_validation_exception_handler(
    field_codes: Mapping[str, str],
    default_code: str = "INVALID_REQUEST",
) -> Callable[[Request, RequestValidationError], Awaitable[JSONResponse]]:
    """Build a 422 handler that maps the first offending field to a domain code."""

    def _code_for(errors: list[dict]) -> str:
        for err in errors:
            for part in err.get("loc", ()):
                if isinstance(part, str) and part in field_codes:
                    return field_codes[part]
        return default_code

    async def handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = list(exc.errors())
        message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_envelope(
                request,
                _code_for(errors),
                message,
                details=jsonable_encoder(errors),
            ),
        )

    return handler


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        return await http_exception_handler(request, exc)
    except Exception:
        logger.exception("Unhandled exception")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(request, "internal_error", "An unexpected error occurred"),
        )
