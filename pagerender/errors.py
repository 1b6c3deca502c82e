"""
Error types raised while rendering.

Every drawing and placement operation either succeeds or raises a
PageRenderError; there is no local recovery. The error carries a kind so
callers can tell an unreadable input file from a backend failure, and the
underlying exception is chained as ``__cause__``.

Contract violations (a rotation outside [-180, 180], splitting an area with
no weight) are programming errors and raise ValueError instead.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Categories of rendering failures."""
    IO = "io"                                    # Reading a font or image source failed
    INVALID_DATA = "invalid_data"                # Input decoded but is unusable (e.g. alpha channel)
    UNSUPPORTED_ENCODING = "unsupported_encoding"  # Font cannot encode or has no glyph for the text
    BACKEND_FAILURE = "backend_failure"          # The document writer failed


class PageRenderError(Exception):
    """Error raised by pagerender operations.

    Attributes:
        message: Human-readable description naming the offending input
        kind: The ErrorKind of this failure
    """

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.message}: {self.__cause__}"
        return self.message

    def __repr__(self) -> str:
        return f"PageRenderError({self.message!r}, {self.kind})"
