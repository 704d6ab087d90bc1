"""Typed RFC 8285 extension element values.

Each value class maps to and from a raw ExtensionElement:

    value.to_raw(id) -> ExtensionElement
    ValueClass.from_raw(element) -> value   (raises RTPInvalidExtensionError)

The element id is negotiated out of band (SDP extmap), so it is supplied by
the caller and never stored on the value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Type, Union

from .exceptions import RTPInvalidExtensionError
from .extension import ExtensionElement
from .packet import RTPPacket
from .utils import check_uint

log = logging.getLogger("rtper.elements")

class ExtensionElementValue(Protocol):
    def to_raw(self, id: int) -> ExtensionElement: ...

    @classmethod
    def from_raw(cls, element: ExtensionElement) -> "ExtensionElementValue": ...

@dataclass(frozen=True)
class AudioLevel:
    """Client-to-mixer audio level, RFC 6464.

    level is the magnitude in -dBov, 0..127.
    """
    voice: bool
    level: int

    def __post_init__(self):
        check_uint("audio level", self.level, 7, RTPInvalidExtensionError)

    def to_raw(self, id: int) -> ExtensionElement:
        return ExtensionElement(id, bytes((int(bool(self.voice)) << 7 | self.level,)))

    @classmethod
    def from_raw(cls, element: ExtensionElement) -> "AudioLevel":
        if len(element.data) != 1:
            raise RTPInvalidExtensionError(
                f"audio level expects 1 byte, got {len(element.data)}")
        b = element.data[0]
        return cls(voice=bool(b >> 7), level=b & 0x7F)

@dataclass(frozen=True)
class TWCC:
    """Transport-wide sequence number, draft-holmer-rmcat-transport-wide-cc-extensions-01."""
    sequence_number: int

    def __post_init__(self):
        check_uint("transport-wide sequence number", self.sequence_number, 16,
                   RTPInvalidExtensionError)

    def to_raw(self, id: int) -> ExtensionElement:
        return ExtensionElement(id, self.sequence_number.to_bytes(2, "big"))

    @classmethod
    def from_raw(cls, element: ExtensionElement) -> "TWCC":
        if len(element.data) != 2:
            raise RTPInvalidExtensionError(
                f"transport-wide sequence number expects 2 bytes, got {len(element.data)}")
        return cls(int.from_bytes(element.data, "big"))

@dataclass(frozen=True)
class SourceDescription:
    """SDES item carried in a header extension, RFC 7941.

    type (e.g. "mid", "cname") is informational only: on the wire the item
    type is implied by the element id.
    """
    text: bytes
    type: Optional[str] = None

    def to_raw(self, id: int) -> ExtensionElement:
        return ExtensionElement(id, self.text)

    @classmethod
    def from_raw(cls, element: ExtensionElement) -> "SourceDescription":
        return cls(element.data)

Decoded = Union[ExtensionElementValue, ExtensionElement]

class ExtensionRegistry:
    """Maps negotiated element ids to value classes.

    Example:
        registry = ExtensionRegistry({1: AudioLevel, 3: TWCC})
        packet = registry.encode(packet, 3, TWCC(42))
        values = registry.decode(packet)
    """

    def __init__(self, mapping: Optional[Dict[int, Type[ExtensionElementValue]]] = None):
        self._by_id: Dict[int, Type[ExtensionElementValue]] = {}
        for id, value_cls in (mapping or {}).items():
            self.register(id, value_cls)

    def register(self, id: int, value_cls: Type[ExtensionElementValue]) -> None:
        check_uint("extension id", id, 8, RTPInvalidExtensionError)
        if id == 0:
            raise RTPInvalidExtensionError("extension id 0 is reserved for padding")
        self._by_id[id] = value_cls

    def get(self, id: int) -> Optional[Type[ExtensionElementValue]]:
        return self._by_id.get(id)

    def from_raw(self, element: ExtensionElement) -> Decoded:
        """Decode element with its registered class; unknown ids stay raw."""
        value_cls = self._by_id.get(element.id)
        if value_cls is None:
            return element
        return value_cls.from_raw(element)

    def decode(self, packet: RTPPacket) -> List[Decoded]:
        return [self.from_raw(element) for element in packet.elements]

    def fetch(self, packet: RTPPacket, id: int) -> Optional[Decoded]:
        element = packet.fetch_extension(id)
        if element is None:
            return None
        return self.from_raw(element)

    def encode(self, packet: RTPPacket, id: int, value: ExtensionElementValue) -> RTPPacket:
        """Return packet with value appended as element id."""
        value_cls = self._by_id.get(id)
        if value_cls is not None and not isinstance(value, value_cls):
            raise RTPInvalidExtensionError(
                f"id {id} is registered for {value_cls.__name__}, got {type(value).__name__}")
        log.debug("adding %s as extension id %d", type(value).__name__, id)
        return packet.add_extension(value.to_raw(id))
