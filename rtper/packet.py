"""RTP packet value and codec (RFC 3550, RFC 8285 header extensions).

Wire layout, network byte order:

    V(2) P(1) X(1) CC(4) M(1) PT(7) | seq(16)
    timestamp(32)
    ssrc(32)
    csrc[0..CC-1] (32 bits each)
    [ if X: profile(16) length-words(16) body ]
    payload
    [ if P: (N-1) zero bytes ++ N(8) ]

Packets are immutable; every mutator returns a new RTPPacket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .exceptions import RTPValidationError
from .extension import (
    Extension,
    ExtensionElement,
    LegacyExtension,
    MultiplexedExtension,
    decode_extension,
    encode_extension,
)
from .header import MAX_CSRC, decode_header, encode_header
from .padding import encode_padding, strip_padding
from .utils import check_mode, check_uint

log = logging.getLogger("rtper.packet")

@dataclass(frozen=True)
class RTPPacket:
    version: int = 2
    marker: bool = False
    payload_type: int = 0
    sequence_number: int = 0
    timestamp: int = 0
    ssrc: int = 0
    csrc: Tuple[int, ...] = ()
    extensions: Optional[Extension] = None
    payload: bytes = b""
    padding_size: int = 0

    def __post_init__(self):
        check_uint("version", self.version, 2)
        check_uint("payload_type", self.payload_type, 7)
        check_uint("sequence_number", self.sequence_number, 16)
        check_uint("timestamp", self.timestamp, 32)
        check_uint("ssrc", self.ssrc, 32)
        check_uint("padding_size", self.padding_size, 8)
        if not isinstance(self.csrc, tuple):
            object.__setattr__(self, "csrc", tuple(self.csrc))
        if len(self.csrc) > MAX_CSRC:
            raise RTPValidationError(f"too many CSRC entries: {len(self.csrc)} > {MAX_CSRC}")
        for c in self.csrc:
            check_uint("csrc", c, 32)
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", bytes(self.payload))
        object.__setattr__(self, "marker", bool(self.marker))
        if self.extensions is not None and not isinstance(
                self.extensions, (LegacyExtension, MultiplexedExtension)):
            raise RTPValidationError(f"invalid extensions value: {self.extensions!r}")

    @property
    def padding(self) -> bool:
        return self.padding_size > 0

    @property
    def extension(self) -> bool:
        return self.extensions is not None

    @property
    def extension_profile(self) -> Optional[int]:
        return self.extensions.profile if self.extensions is not None else None

    @property
    def elements(self) -> Tuple[ExtensionElement, ...]:
        """Multiplexed extension elements in wire order; empty otherwise."""
        if isinstance(self.extensions, MultiplexedExtension):
            return self.extensions.elements
        return ()

    def fetch_extension(self, id: int) -> Optional[ExtensionElement]:
        if isinstance(self.extensions, MultiplexedExtension):
            return self.extensions.get(id)
        return None

    def set_extension(self, profile: int, data: bytes) -> "RTPPacket":
        """Install an RFC 3550 extension, replacing any existing one."""
        return replace(self, extensions=LegacyExtension(profile, data))

    def add_extension(self, element: ExtensionElement) -> "RTPPacket":
        """Append an RFC 8285 element, discarding any RFC 3550 extension."""
        if isinstance(self.extensions, MultiplexedExtension):
            extensions = self.extensions.append(element)
        else:
            if self.extensions is not None:
                log.debug("discarding legacy extension 0x%04X", self.extensions.profile)
            extensions = MultiplexedExtension.start(element)
        return replace(self, extensions=extensions)

    def remove_extensions(self) -> "RTPPacket":
        return replace(self, extensions=None)

    def with_padding(self, size: int) -> "RTPPacket":
        """Return a copy padded with size bytes; 0 removes padding."""
        return replace(self, padding_size=size)

    def serialize(self) -> bytes:
        return encode(self)

    def __bytes__(self) -> bytes:
        return encode(self)

    @staticmethod
    def parse(raw: bytes, mode: str = "strict") -> "RTPPacket":
        return decode(raw, mode)

def new(payload: bytes = b"",
        *,
        version: int = 2,
        marker: bool = False,
        payload_type: int = 0,
        sequence_number: int = 0,
        timestamp: int = 0,
        ssrc: int = 0,
        csrc=(),
        padding_size: int = 0) -> RTPPacket:
    """Create a packet without header extensions.

    padding_size counts all pad bytes including the count byte; 0 means no
    padding. Extensions are added with add_extension / set_extension.

    Raises:
        RTPValidationError on more than 15 CSRCs or out-of-range fields.
    """
    return RTPPacket(
        version=version,
        marker=marker,
        payload_type=payload_type,
        sequence_number=sequence_number,
        timestamp=timestamp,
        ssrc=ssrc,
        csrc=tuple(csrc),
        payload=payload,
        padding_size=padding_size,
    )

def encode(packet: RTPPacket) -> bytes:
    out = encode_header(packet)
    if packet.extensions is not None:
        out += encode_extension(packet.extensions)
    out += packet.payload
    if packet.padding:
        out += encode_padding(packet.padding_size)
    return out

def decode(raw: bytes, mode: str = "strict") -> RTPPacket:
    """Decode one RTP packet.

    Version and other field values are passed through unchecked.

    Raises:
        RTPInsufficientDataError when raw is shorter than a length field
        declares (header, CSRC list, padding or extension).
    """
    check_mode(mode)
    raw = bytes(raw)
    header, rest = decode_header(raw)
    padding_size = 0
    if header.padding:
        rest, padding_size = strip_padding(rest)
    extensions = None
    if header.extension:
        extensions, rest = decode_extension(rest, mode)
    log.debug("decoded RTP packet ssrc=0x%08X seq=%d pt=%d payload=%d bytes",
              header.ssrc, header.sequence_number, header.payload_type, len(rest))
    return RTPPacket(
        version=header.version,
        marker=header.marker,
        payload_type=header.payload_type,
        sequence_number=header.sequence_number,
        timestamp=header.timestamp,
        ssrc=header.ssrc,
        csrc=header.csrc,
        extensions=extensions,
        payload=rest,
        padding_size=padding_size,
    )

def fetch_extension(packet: RTPPacket, id: int) -> Optional[ExtensionElement]:
    return packet.fetch_extension(id)

def set_extension(packet: RTPPacket, profile: int, data: bytes) -> RTPPacket:
    return packet.set_extension(profile, data)

def add_extension(packet: RTPPacket, element: ExtensionElement) -> RTPPacket:
    return packet.add_extension(element)

def remove_extensions(packet: RTPPacket) -> RTPPacket:
    return packet.remove_extensions()
