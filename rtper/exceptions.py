"""RTP-specific exception hierarchy."""

class RTPError(Exception):
    """Base RTP exception."""
    pass

class RTPValidationError(RTPError, ValueError):
    """Raised when packet construction input is out of range."""
    pass

class RTPInvalidExtensionError(RTPValidationError):
    """Header extension violates element, profile or length constraints."""
    pass

class RTPInsufficientDataError(RTPError, ValueError):
    """Raised when a buffer is shorter than a declared length field."""
    pass
