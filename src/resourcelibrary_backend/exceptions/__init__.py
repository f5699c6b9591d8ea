"""
Error handling package for the resource library backend.

This package provides:
- Custom exception classes with error codes
- Error registry management
- FastAPI exception handlers

Usage:
    from resourcelibrary_backend.exceptions import (
        CourseNotFoundException,
        TypeMismatchError,
        register_exception_handlers,
    )
"""

from resourcelibrary_backend.exceptions.exceptions import (
    # Base exception
    ResourceLibraryException,

    # Authentication exceptions (401)
    UnauthorizedException,

    # Authorization exceptions (403)
    AdminRequiredException,
    CourseAccessDeniedException,

    # Validation exceptions (400)
    BadRequestException,

    # Not found exceptions (404)
    NotFoundException,
    CourseNotFoundException,

    # Conflict exceptions (409)
    ConflictException,

    # Filter exceptions (500)
    TypeMismatchError,
    QueryParameterConflictException,

    # Internal server exceptions (500/503)
    InternalServerException,
    ServiceUnavailableException,
)

from resourcelibrary_backend.exceptions.error_registry import (
    load_error_registry,
    get_error_definition,
    get_all_error_codes,
    get_errors_by_category,
    get_registry_version,
    validate_error_registry,
)

from resourcelibrary_backend.exceptions.error_handlers import (
    register_exception_handlers,
    resourcelibrary_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    generic_exception_handler,
)


__all__ = [
    "ResourceLibraryException",
    "UnauthorizedException",
    "AdminRequiredException",
    "CourseAccessDeniedException",
    "BadRequestException",
    "NotFoundException",
    "CourseNotFoundException",
    "ConflictException",
    "TypeMismatchError",
    "QueryParameterConflictException",
    "InternalServerException",
    "ServiceUnavailableException",
    "load_error_registry",
    "get_error_definition",
    "get_all_error_codes",
    "get_errors_by_category",
    "get_registry_version",
    "validate_error_registry",
    "register_exception_handlers",
    "resourcelibrary_exception_handler",
    "validation_exception_handler",
    "http_exception_handler",
    "generic_exception_handler",
]
