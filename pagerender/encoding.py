"""Text encoding for the built-in PDF fonts."""

from __future__ import annotations

from typing import List

from pagerender.errors import ErrorKind, PageRenderError

# Built-in fonts are written with WinAnsiEncoding, i.e. Windows-1252.
BUILTIN_FONT_CODEC = "cp1252"


def encode_win1252(text: str) -> List[int]:
    """Encode text as single-byte Windows-1252 codes for a built-in font.

    Raises:
        PageRenderError: UNSUPPORTED_ENCODING if a character has no
            Windows-1252 representation; the message names the string
    """
    try:
        data = text.encode(BUILTIN_FONT_CODEC)
    except UnicodeEncodeError as e:
        raise PageRenderError(
            "Tried to print a string with characters that are not supported by the "
            f"Windows-1252 encoding with a built-in font: {text}",
            ErrorKind.UNSUPPORTED_ENCODING,
        ) from e
    return list(data)


def decode_win1252(code: int) -> str:
    """Inverse of encode_win1252 for a single code."""
    return bytes([code]).decode(BUILTIN_FONT_CODEC)
