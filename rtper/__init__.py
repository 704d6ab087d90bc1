"""rtper - RTP packet codec (RFC 3550, RFC 8285 header extensions)

Public API:
  - RTPPacket: immutable packet value with extension helpers
  - new / encode / decode: build, serialize and parse one packet
  - fetch_extension / set_extension / add_extension / remove_extensions
  - ExtensionElement, LegacyExtension, MultiplexedExtension: extension values
  - AudioLevel, TWCC, SourceDescription, ExtensionRegistry: typed elements
"""

from .packet import (
    RTPPacket,
    new,
    encode,
    decode,
    fetch_extension,
    set_extension,
    add_extension,
    remove_extensions,
)
from .extension import (
    ExtensionElement,
    LegacyExtension,
    MultiplexedExtension,
    ONE_BYTE_PROFILE,
    TWO_BYTE_PROFILE,
    MAX_EXTENSION_LENGTH,
)
from .header import RTP_HEADER_LENGTH, MAX_CSRC
from .elements import AudioLevel, TWCC, SourceDescription, ExtensionRegistry
from .exceptions import *

__all__ = [
    "RTPPacket",
    "new", "encode", "decode",
    "fetch_extension", "set_extension", "add_extension", "remove_extensions",
    "ExtensionElement", "LegacyExtension", "MultiplexedExtension",
    "ONE_BYTE_PROFILE", "TWO_BYTE_PROFILE", "MAX_EXTENSION_LENGTH",
    "RTP_HEADER_LENGTH", "MAX_CSRC",
    "AudioLevel", "TWCC", "SourceDescription", "ExtensionRegistry",
    # exceptions
    "RTPError", "RTPValidationError", "RTPInvalidExtensionError", "RTPInsufficientDataError",
]
