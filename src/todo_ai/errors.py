from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    EMPTY_INPUT = "EmptyInput"
    BACKEND_CONFIG = "BackendConfigError"
    BACKEND_HTTP = "BackendHTTPError"
    TIMEOUT = "Timeout"
    RESPONSE_PARSE = "ResponseParseError"

    @property
    def recoverable(self) -> bool:
        """Whether the rule engine may stand in for the AI backend on this failure."""
        return self in {ErrorKind.BACKEND_HTTP, ErrorKind.TIMEOUT, ErrorKind.RESPONSE_PARSE}


class ExtractionError(Exception):
    """Base error of the extraction pipeline."""

    kind: ErrorKind = ErrorKind.RESPONSE_PARSE

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


class EmptyInputError(ExtractionError):
    kind = ErrorKind.EMPTY_INPUT


class BackendConfigError(ExtractionError):
    """Missing API key, missing base URL or unknown provider."""

    kind = ErrorKind.BACKEND_CONFIG


class BackendHTTPError(ExtractionError):
    kind = ErrorKind.BACKEND_HTTP


class ExtractionTimeout(ExtractionError):
    kind = ErrorKind.TIMEOUT


class ResponseParseError(ExtractionError):
    kind = ErrorKind.RESPONSE_PARSE
