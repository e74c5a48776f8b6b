"""FastAPI middleware for error handling."""

from .error_handlers import (
    document_not_found_handler,
    http_exception_handler,
    internal_exception_handler,
    register_error_handlers,
    structural_integrity_handler,
    validation_exception_handler,
)

__all__ = [
    "register_error_handlers",
    "validation_exception_handler",
    "http_exception_handler",
    "structural_integrity_handler",
    "document_not_found_handler",
    "internal_exception_handler",
]
