"""
Exception classes with error codes and rich metadata.

Every exception carries an error code from the error registry; the FastAPI
handlers in ``error_handlers`` turn them into structured responses.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status
import inspect
from datetime import datetime, timezone

from resourcelibrary_backend.schemas.errors import ErrorResponse, ErrorDebugInfo


class ResourceLibraryException(HTTPException):
    """
    Base exception class for all resource library exceptions.

    Provides:
    - Unique error codes from registry
    - Structured error responses
    - Debug information in development mode
    - Context metadata for logging and debugging
    """

    def __init__(
        self,
        error_code: str,
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        context: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ):
        """
        Initialize exception with error code and metadata.

        Args:
            error_code: Error code from error registry (e.g., "AUTH_001")
            detail: Additional detail message (overrides registry message if provided)
            headers: HTTP response headers
            context: Additional context for debugging
            user_id: User ID if available
        """
        self.error_code = error_code
        self.context = context or {}
        self.user_id = user_id

        # Caller information, skipping this __init__ and the subclass __init__
        frame = inspect.currentframe()
        caller_frame = frame.f_back.f_back if frame and frame.f_back else None
        if caller_frame:
            self.function_name = caller_frame.f_code.co_name
            self.file_name = caller_frame.f_code.co_filename
            self.line_number = caller_frame.f_lineno
        else:
            self.function_name = None
            self.file_name = None
            self.line_number = None

        # The actual status_code is set by subclasses
        super().__init__(status_code=500, detail=detail, headers=headers)

    def __str__(self) -> str:
        return f"{self.error_code}: {self.detail}" if self.detail else self.error_code

    def to_error_response(self, include_debug: bool = False) -> ErrorResponse:
        """
        Convert exception to structured ErrorResponse.

        Args:
            include_debug: Whether to include debug information (dev mode only)

        Returns:
            ErrorResponse with error code, message, and optional debug info
        """
        from resourcelibrary_backend.exceptions.error_registry import get_error_definition

        error_def = get_error_definition(self.error_code)

        debug_info = None
        if include_debug:
            debug_info = ErrorDebugInfo(
                timestamp=datetime.now(timezone.utc).isoformat(),
                function=self.function_name,
                file=self.file_name,
                line=self.line_number,
                user_id=self.user_id,
                additional_context=self.context,
            )

        message = error_def.message.plain
        details = self.context if self.context else None

        if self.detail:
            if isinstance(self.detail, str):
                message = self.detail
            elif isinstance(self.detail, dict):
                details = self.detail
                if "message" in self.detail and isinstance(self.detail["message"], str):
                    message = self.detail["message"]

        return ErrorResponse(
            error_code=self.error_code,
            message=message,
            details=details,
            severity=error_def.severity,
            category=error_def.category,
            retry_after=error_def.retry_after,
            debug=debug_info,
        )


# ============================================================================
# AUTHENTICATION EXCEPTIONS (401)
# ============================================================================


class UnauthorizedException(ResourceLibraryException):
    """Authentication required - 401"""

    def __init__(
        self,
        error_code: str = "AUTH_001",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_401_UNAUTHORIZED


# ============================================================================
# AUTHORIZATION EXCEPTIONS (403)
# ============================================================================


class AdminRequiredException(ResourceLibraryException):
    """Admin access required - 403"""

    def __init__(
        self,
        error_code: str = "AUTHZ_002",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_403_FORBIDDEN


class CourseAccessDeniedException(ResourceLibraryException):
    """Course access denied - 403"""

    def __init__(
        self,
        error_code: str = "AUTHZ_003",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_403_FORBIDDEN


# ============================================================================
# VALIDATION EXCEPTIONS (400)
# ============================================================================


class BadRequestException(ResourceLibraryException):
    """Invalid request data - 400"""

    def __init__(
        self,
        error_code: str = "VAL_001",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_400_BAD_REQUEST


# ============================================================================
# NOT FOUND EXCEPTIONS (404)
# ============================================================================


class NotFoundException(ResourceLibraryException):
    """Resource not found - 404"""

    def __init__(
        self,
        error_code: str = "NF_001",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_404_NOT_FOUND


class CourseNotFoundException(ResourceLibraryException):
    """Course not found - 404"""

    def __init__(
        self,
        error_code: str = "NF_003",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_404_NOT_FOUND


# ============================================================================
# CONFLICT EXCEPTIONS (409)
# ============================================================================


class ConflictException(ResourceLibraryException):
    """Resource conflict - 409"""

    def __init__(
        self,
        error_code: str = "CONFLICT_001",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_409_CONFLICT


# ============================================================================
# FILTER EXCEPTIONS (500)
# ============================================================================


class TypeMismatchError(ResourceLibraryException):
    """Filter built over a field of another type - 500"""

    def __init__(
        self,
        field_type: Optional[str] = None,
        expected_type: Optional[str] = None,
        error_code: str = "FLT_001",
        detail: Any = None,
        **kwargs,
    ):
        if "context" not in kwargs:
            kwargs["context"] = {}
        kwargs["context"]["field_type"] = field_type
        kwargs["context"]["expected_type"] = expected_type
        super().__init__(error_code=error_code, detail=detail, **kwargs)
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class QueryParameterConflictException(ResourceLibraryException):
    """Two predicate fragments bound the same parameter name - 500"""

    def __init__(
        self,
        parameter: Optional[str] = None,
        error_code: str = "FLT_002",
        detail: Any = None,
        **kwargs,
    ):
        if parameter:
            if "context" not in kwargs:
                kwargs["context"] = {}
            kwargs["context"]["parameter"] = parameter
        super().__init__(error_code=error_code, detail=detail, **kwargs)
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# ============================================================================
# INTERNAL SERVER EXCEPTIONS (500/503)
# ============================================================================


class InternalServerException(ResourceLibraryException):
    """Internal server error - 500"""

    def __init__(
        self,
        error_code: str = "INT_001",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServiceUnavailableException(ResourceLibraryException):
    """Service temporarily unavailable - 503"""

    def __init__(
        self,
        error_code: str = "DB_001",
        detail: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(error_code=error_code, detail=detail, headers=headers, **kwargs)
        self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
