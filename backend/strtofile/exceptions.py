"""
StrToFile Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the archive conversion core.
How:   Each exception carries a user-facing message, an optional context dict
       and a machine-readable `error_code` tag. Global handlers registered in
       main.py turn them into structured JSON error responses; non-HTTP callers
       can use `strtofile.result.capture` to receive them as tagged results.
Who:   Raised by the services layer and by route-level request checks.

Exception Hierarchy:
    StrToFileError (base)
    ├── ValidationError   → 400 Bad Request (absent input, empty upload)
    ├── FormatError       → 400 Bad Request (not a valid ZIP archive)
    └── InternalError     → 500 Internal Server Error (I/O, undecodable text)

None of these are retryable: a corrupt archive or an empty upload fails the
same way every time.
"""

from typing import Any, Dict, Optional


class StrToFileError(Exception):
    """
    Base exception for all StrToFile application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged, returned only for client errors)
        error_code:  Tag identifying the error kind in responses and results
    """

    error_code = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StrToFileError):
    """
    Raised when the caller supplied absent or empty input.

    When:    Record list is None, a record or sink is None, an uploaded archive
             is missing or zero bytes long, or a request body fails route checks.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "An uploaded file is empty, please check the ZIP uploads",
            "details": {"field": "zipFile", "index": 1}
        }
    """

    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class FormatError(StrToFileError):
    """
    Raised when a byte source is not a structurally valid or decodable archive.

    When:    Bad signature, corrupted central directory, CRC mismatch, broken
             deflate stream, or an entry stored with an unsupported method.
    HTTP:    400 Bad Request
    """

    error_code = "format_error"

    def __init__(
        self,
        message: str = "The ZIP file is invalid or corrupted",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(StrToFileError):
    """
    Raised for any other failure during a build or parse.

    When:    The output sink or input stream raised an OSError, or an entry
             payload is not valid UTF-8 text.
    HTTP:    500 Internal Server Error

    The response message stays generic; the context is logged server-side.
    """

    error_code = "internal_error"

    def __init__(
        self,
        message: str = "An internal error occurred while processing the archive",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
