"""Exception hierarchy for qrlogo."""


class QRLogoError(Exception):
    """Base class for every error raised by qrlogo."""


class InvalidArgument(QRLogoError, ValueError):
    """Bad input detected before any rendering work starts."""


class InvalidDimension(InvalidArgument):
    """Non-positive edge length or an empty module matrix."""


class InvalidImage(InvalidArgument):
    """Image with zero width or height."""


class InvalidLogoConfig(InvalidArgument):
    """Logo configuration that cannot be drawn inside the canvas."""


class EncodeFailure(QRLogoError):
    """The symbol encoder rejected the content.

    Attributes:
        text: The content that failed to encode.
    """

    def __init__(self, text: str, reason: str = ""):
        self.text = text
        self.reason = reason
        message = f"failed to encode QR code for content {text!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CompositionFailure(QRLogoError):
    """Unexpected error while loading, rounding or overlaying the logo."""


class DecodeFailure(QRLogoError):
    """A symbol was supplied but could not be read."""


class NotFound(DecodeFailure):
    """No QR symbol was located in the image."""


class DecoderUnavailable(DecodeFailure):
    """A decoder's backing library could not be loaded."""
