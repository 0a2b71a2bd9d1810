from shared.middleware.request_id import request_id_middleware
from shared.middleware.error_handler import (
    error_envelope_middleware,
    http_exception_handler,
    make_validation_exception_handler,
)

__all__ = [
    "request_id_middleware",
    "error_envelope_middleware",
    "http_exception_handler",
    "make_validation_exception_handler",
]
