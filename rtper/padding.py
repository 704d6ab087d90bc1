"""RTP padding (RFC 3550 section 5.1, P bit).

Padding sits at the very end of the packet, after the payload and the
header extension. Its last byte counts all pad bytes including itself.
"""

from __future__ import annotations

from typing import Tuple

from .exceptions import RTPInsufficientDataError, RTPValidationError

MAX_PADDING_SIZE = 255

def encode_padding(size: int) -> bytes:
    """Return (size - 1) zero bytes followed by the count byte."""
    if isinstance(size, bool) or not isinstance(size, int) or not 1 <= size <= MAX_PADDING_SIZE:
        raise RTPValidationError(f"padding size must be in 1..{MAX_PADDING_SIZE}, got {size!r}")
    return bytes(size - 1) + bytes((size,))

def strip_padding(raw: bytes) -> Tuple[bytes, int]:
    """Split trailing padding off raw.

    Returns:
        (rest, padding_size)
    Raises:
        RTPInsufficientDataError if the count byte is missing, zero, or
        larger than the bytes available.
    """
    if not raw:
        raise RTPInsufficientDataError("padding expected but no bytes left")
    size = raw[-1]
    if size == 0 or size > len(raw):
        raise RTPInsufficientDataError(f"Invalid RTP padding: {size} of {len(raw)} bytes")
    return raw[:len(raw) - size], size
