"""RTP header extensions.

Two families share the X bit and the 4-byte extension header
(profile(16) + length in 32-bit words(16)):

  - RFC 3550 section 5.3.1: a single opaque blob under any profile value.
  - RFC 8285: a list of (id, data) elements, encoded with one-byte headers
    under profile 0xBEDE or two-byte headers under profile 0x1000.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .exceptions import RTPInsufficientDataError, RTPInvalidExtensionError
from .utils import check_mode, check_uint, padl

log = logging.getLogger("rtper.extension")

ONE_BYTE_PROFILE = 0xBEDE
# RFC 8285 section 4.3 reserves the low 4 bits as "appbits"; only 0x1000 is produced here
TWO_BYTE_PROFILE = 0x1000
MULTIPLEXED_PROFILES = (ONE_BYTE_PROFILE, TWO_BYTE_PROFILE)

EXTENSION_HEADER_LENGTH = 4
MAX_EXTENSION_LENGTH = 0xFFFF * 4

ONE_BYTE_STOP_ID = 15

@dataclass(frozen=True)
class ExtensionElement:
    """One (id, data) pair of an RFC 8285 extension block."""
    id: int
    data: bytes = b""

    def __post_init__(self):
        check_uint("extension id", self.id, 8, RTPInvalidExtensionError)
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise RTPInvalidExtensionError(
                f"extension data must be bytes, got {type(self.data).__name__}")
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

def is_one_byte_eligible(element: ExtensionElement) -> bool:
    return 1 <= element.id <= 14 and 1 <= len(element.data) <= 16

def is_two_byte_eligible(element: ExtensionElement) -> bool:
    return 1 <= element.id <= 255 and len(element.data) <= 255

def body_length(profile: int, elements: Iterable[ExtensionElement]) -> int:
    """Encoded size of an RFC 8285 body, including trailing pad bytes."""
    header = 1 if profile == ONE_BYTE_PROFILE else 2
    length = sum(header + len(element.data) for element in elements)
    return length + padl(length)

@dataclass(frozen=True)
class LegacyExtension:
    """RFC 3550 header extension: opaque data under a 16-bit profile."""
    profile: int
    data: bytes = b""

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        check_uint("extension profile", self.profile, 16, RTPInvalidExtensionError)
        if self.profile in MULTIPLEXED_PROFILES:
            raise RTPInvalidExtensionError(
                f"profile 0x{self.profile:04X} is reserved for RFC 8285 elements")
        if len(self.data) % 4:
            raise RTPInvalidExtensionError(
                f"extension data length must be a multiple of 4, got {len(self.data)}")
        if len(self.data) > MAX_EXTENSION_LENGTH:
            raise RTPInvalidExtensionError(
                f"extension data too long: {len(self.data)} > {MAX_EXTENSION_LENGTH}")

@dataclass(frozen=True)
class MultiplexedExtension:
    """RFC 8285 header extension: ordered elements under 0xBEDE or 0x1000."""
    profile: int
    elements: Tuple[ExtensionElement, ...] = ()

    def __post_init__(self):
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))
        if self.profile == ONE_BYTE_PROFILE:
            eligible = is_one_byte_eligible
        elif self.profile == TWO_BYTE_PROFILE:
            eligible = is_two_byte_eligible
        else:
            raise RTPInvalidExtensionError(
                f"profile 0x{self.profile:04X} is not an RFC 8285 profile")
        for element in self.elements:
            if not eligible(element):
                raise RTPInvalidExtensionError(
                    f"element id={element.id} len={len(element.data)} "
                    f"does not fit profile 0x{self.profile:04X}")
        length = body_length(self.profile, self.elements)
        if length > MAX_EXTENSION_LENGTH:
            raise RTPInvalidExtensionError(
                f"extension body too long: {length} > {MAX_EXTENSION_LENGTH}")

    def get(self, id: int) -> Optional[ExtensionElement]:
        for element in self.elements:
            if element.id == id:
                return element
        return None

    def append(self, element: ExtensionElement) -> "MultiplexedExtension":
        """Return a new extension with element added.

        Promotion is sticky: a two-byte body stays two-byte, a one-byte body
        becomes two-byte as soon as an element does not fit one-byte headers.
        """
        if not is_two_byte_eligible(element):
            raise RTPInvalidExtensionError(
                f"element id={element.id} len={len(element.data)} fits no RFC 8285 format")
        profile = self.profile
        if profile == ONE_BYTE_PROFILE and not is_one_byte_eligible(element):
            log.debug("promoting extension body to two-byte headers for id=%d", element.id)
            profile = TWO_BYTE_PROFILE
        return MultiplexedExtension(profile, self.elements + (element,))

    @classmethod
    def start(cls, element: ExtensionElement) -> "MultiplexedExtension":
        profile = ONE_BYTE_PROFILE if is_one_byte_eligible(element) else TWO_BYTE_PROFILE
        return cls(profile).append(element)

Extension = Union[LegacyExtension, MultiplexedExtension]

# one-byte body: id(4) len-1(4) data
def encode_one_byte(elements: Iterable[ExtensionElement]) -> bytes:
    body = bytearray()
    for element in elements:
        body.append((element.id << 4) | (len(element.data) - 1))
        body += element.data
    body += bytes(padl(len(body)))
    return bytes(body)

def decode_one_byte(body: bytes, mode: str = "strict") -> List[ExtensionElement]:
    elements = []
    pos = 0
    while pos < len(body):
        x_id = body[pos] >> 4
        if x_id == 0:
            pos += 1
            continue
        if x_id == ONE_BYTE_STOP_ID:
            log.debug("one-byte stop marker at offset %d, %d bytes ignored", pos, len(body) - pos)
            break
        x_length = (body[pos] & 0x0F) + 1
        pos += 1
        if pos + x_length > len(body):
            _truncated("RTP one-byte header extension value is truncated", mode)
            break
        elements.append(ExtensionElement(x_id, body[pos:pos + x_length]))
        pos += x_length
    return elements

# two-byte body: id(8) len(8) data
def encode_two_byte(elements: Iterable[ExtensionElement]) -> bytes:
    body = bytearray()
    for element in elements:
        body.append(element.id)
        body.append(len(element.data))
        body += element.data
    body += bytes(padl(len(body)))
    return bytes(body)

def decode_two_byte(body: bytes, mode: str = "strict") -> List[ExtensionElement]:
    elements = []
    pos = 0
    while pos < len(body):
        if body[pos] == 0:
            pos += 1
            continue
        if pos + 2 > len(body):
            _truncated("RTP two-byte header extension is truncated", mode)
            break
        x_id, x_length = body[pos], body[pos + 1]
        pos += 2
        if pos + x_length > len(body):
            _truncated("RTP two-byte header extension value is truncated", mode)
            break
        elements.append(ExtensionElement(x_id, body[pos:pos + x_length]))
        pos += x_length
    return elements

def _truncated(message: str, mode: str) -> None:
    if mode == "strict":
        raise RTPInsufficientDataError(message)
    log.warning("lenient: %s - dropping rest of extension body", message)

def encode_extension(extension: Extension) -> bytes:
    """Serialize the extension header and body."""
    if isinstance(extension, MultiplexedExtension):
        if extension.profile == ONE_BYTE_PROFILE:
            body = encode_one_byte(extension.elements)
        else:
            body = encode_two_byte(extension.elements)
    else:
        body = extension.data
    return (extension.profile.to_bytes(2, "big")
            + (len(body) // 4).to_bytes(2, "big")
            + body)

def decode_extension(raw: bytes, mode: str = "strict") -> Tuple[Extension, bytes]:
    """Parse an extension block from the start of raw.

    Returns:
        (extension, rest) where rest follows the extension body.
    Raises:
        RTPInsufficientDataError if the header or the declared body is cut off.
    """
    check_mode(mode)
    if len(raw) < EXTENSION_HEADER_LENGTH:
        raise RTPInsufficientDataError("extension header truncated")
    profile = int.from_bytes(raw[0:2], "big")
    length = int.from_bytes(raw[2:4], "big") * 4
    end = EXTENSION_HEADER_LENGTH + length
    if end > len(raw):
        raise RTPInsufficientDataError(
            f"extension contents truncated: {length} declared, {len(raw) - EXTENSION_HEADER_LENGTH} available")
    body = raw[EXTENSION_HEADER_LENGTH:end]
    if profile == ONE_BYTE_PROFILE:
        extension = MultiplexedExtension(profile, tuple(decode_one_byte(body, mode)))
    elif profile == TWO_BYTE_PROFILE:
        extension = MultiplexedExtension(profile, tuple(decode_two_byte(body, mode)))
    else:
        extension = LegacyExtension(profile, body)
    return extension, raw[end:]
