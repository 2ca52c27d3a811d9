"""
Standard response envelope for toolcache CLI output.

All command output follows one structure:

    {
        "success": bool,       # operation success/failure
        "data": {...},         # primary payload (error details on failure)
        "error": str | null,   # error message or null on success
        "meta": {
            "version": "response-v2",
            "request_id": "cli_abc123"?
        }
    }

Error payloads carry ``error_code`` (see ``ErrorCode``), ``error_type``
(see ``ErrorType``) and an optional ``remediation`` hint.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from toolcache.core.context import get_correlation_id

RESPONSE_VERSION = "response-v2"


class ErrorCode(str, Enum):
    """Machine-readable error codes, SCREAMING_SNAKE_CASE."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CONFIG = "INVALID_CONFIG"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorType(str, Enum):
    """Error categories for client-side routing."""

    VALIDATION = "validation"
    INTERNAL = "internal"


@dataclass
class ToolResponse:
    """Envelope returned by every command.

    Attributes:
        success: Whether the operation completed successfully
        data: The primary payload
        error: Error message if success is False, None otherwise
        meta: Response metadata including version identifier
    """

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": RESPONSE_VERSION})


def _build_meta() -> Dict[str, Any]:
    """Construct a metadata payload that always includes the response version."""
    meta: Dict[str, Any] = {"version": RESPONSE_VERSION}
    request_id = get_correlation_id()
    if request_id:
        meta["request_id"] = request_id
    return meta


def success_response(data: Optional[Mapping[str, Any]] = None) -> ToolResponse:
    """Create a standardized success response.

    Args:
        data: Mapping used as the payload.
    """
    return ToolResponse(
        success=True,
        data=dict(data) if data else {},
        error=None,
        meta=_build_meta(),
    )


def error_response(
    message: str,
    *,
    error_code: Optional[Union[ErrorCode, str]] = None,
    error_type: Optional[Union[ErrorType, str]] = None,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Create a standardized error response.

    Args:
        message: Human-readable description of the failure.
        error_code: Canonical error code (``ErrorCode`` or string).
        error_type: Error category (``ErrorType`` or string).
        remediation: User-facing guidance on how to fix the issue.
        details: Extra machine-readable context.

    Example:
        >>> error_response(
        ...     "passes must be at least 1",
        ...     error_code=ErrorCode.VALIDATION_ERROR,
        ...     error_type=ErrorType.VALIDATION,
        ...     remediation="Pass --passes 1 or higher",
        ... )
    """
    code = error_code if error_code is not None else ErrorCode.INTERNAL_ERROR
    kind = error_type if error_type is not None else ErrorType.INTERNAL

    payload: Dict[str, Any] = {
        "error_code": code.value if isinstance(code, Enum) else code,
        "error_type": kind.value if isinstance(kind, Enum) else kind,
    }
    if remediation is not None:
        payload["remediation"] = remediation
    if details:
        payload["details"] = dict(details)

    return ToolResponse(
        success=False,
        data=payload,
        error=message,
        meta=_build_meta(),
    )
