"""RTP fixed header and CSRC list (RFC 3550 section 5.1)."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple

from .exceptions import RTPInsufficientDataError

RTP_HEADER_LENGTH = 12
MAX_CSRC = 15

_FIXED = struct.Struct("!BBHII")

@dataclass(frozen=True)
class RTPHeader:
    version: int
    padding: bool
    extension: bool
    marker: bool
    payload_type: int
    sequence_number: int
    timestamp: int
    ssrc: int
    csrc: Tuple[int, ...] = ()

def encode_header(header) -> bytes:
    """Pack the fixed header and CSRC list of header (an RTPHeader or RTPPacket)."""
    b0 = ((header.version & 0x03) << 6
          | int(header.padding) << 5
          | int(header.extension) << 4
          | len(header.csrc))
    b1 = int(header.marker) << 7 | (header.payload_type & 0x7F)
    out = _FIXED.pack(b0, b1, header.sequence_number, header.timestamp, header.ssrc)
    return out + b"".join(c.to_bytes(4, "big") for c in header.csrc)

def decode_header(raw: bytes) -> Tuple[RTPHeader, bytes]:
    """Parse the fixed header and CSRC list.

    Returns:
        (header, rest)
    Raises:
        RTPInsufficientDataError if raw is shorter than 12 + 4 * CC bytes.
    """
    if len(raw) < RTP_HEADER_LENGTH:
        raise RTPInsufficientDataError(f"RTP packet too short: {len(raw)} bytes")
    b0, b1, sequence_number, timestamp, ssrc = _FIXED.unpack_from(raw)
    csrc_count = b0 & 0x0F
    end = RTP_HEADER_LENGTH + 4 * csrc_count
    if len(raw) < end:
        raise RTPInsufficientDataError(f"CSRC truncated: {len(raw)} < {end}")
    csrc = tuple(int.from_bytes(raw[offset:offset + 4], "big")
                 for offset in range(RTP_HEADER_LENGTH, end, 4))
    header = RTPHeader(
        version=(b0 >> 6) & 0x03,
        padding=bool((b0 >> 5) & 0x01),
        extension=bool((b0 >> 4) & 0x01),
        marker=bool((b1 >> 7) & 0x01),
        payload_type=b1 & 0x7F,
        sequence_number=sequence_number,
        timestamp=timestamp,
        ssrc=ssrc,
        csrc=csrc,
    )
    return header, raw[end:]
