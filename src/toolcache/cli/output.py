"""JSON output helpers for the toolcache CLI.

The CLI is JSON-first: every command prints exactly one response envelope
(see ``toolcache.core.responses``). Successes go to stdout, errors to
stderr with exit status 1.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Mapping, NoReturn

from toolcache.core.responses import (
    ErrorCode,
    ErrorType,
    error_response,
    success_response,
)


def emit(data: Any) -> None:
    """Emit minified JSON to stdout.

    Args:
        data: Any JSON-serializable data structure.
    """
    print(json.dumps(data, separators=(",", ":"), default=str))


def emit_error(
    message: str,
    code: str = ErrorCode.INTERNAL_ERROR.value,
    *,
    error_type: str = ErrorType.INTERNAL.value,
    remediation: str | None = None,
    details: Mapping[str, Any] | None = None,
) -> NoReturn:
    """Emit error JSON to stderr and exit with code 1.

    Args:
        message: Human-readable error description.
        code: Error code in SCREAMING_SNAKE_CASE (e.g., VALIDATION_ERROR).
        error_type: Error category (validation, internal).
        remediation: Actionable guidance for resolving the error.
        details: Optional additional error context.

    Raises:
        SystemExit: Always exits with code 1.
    """
    response = error_response(
        message=message,
        error_code=code,
        error_type=error_type,
        remediation=remediation,
        details=details,
    )
    print(json.dumps(asdict(response), separators=(",", ":"), default=str), file=sys.stderr)
    sys.exit(1)


def emit_success(data: Mapping[str, Any]) -> None:
    """Emit success response envelope to stdout.

    Args:
        data: The operation-specific payload.
    """
    emit(asdict(success_response(data)))
