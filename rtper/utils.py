"""Utilities: logging, field validation helpers.

check_uint is used by the packet constructor and the element codecs to
keep every value inside the bit width it is packed into.
"""

from __future__ import annotations

import logging

from .exceptions import RTPValidationError

logger = logging.getLogger("rtper")
logger.addHandler(logging.NullHandler())

MODES = ("strict", "lenient")

def check_uint(name: str, value: int, bits: int, exc: type = RTPValidationError) -> int:
    """Validate that value fits an unsigned field of the given bit width."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise exc(f"{name} must be int, got {type(value).__name__}")
    if not 0 <= value < (1 << bits):
        raise exc(f"{name} out of range for {bits} bits: {value}")
    return value

def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise RTPValidationError(f"Invalid mode: {mode!r}")
    return mode

def padl(length: int) -> int:
    """Return amount of padding needed for a 4-byte multiple."""
    return 4 * ((length + 3) // 4) - length
