"""qrlogo: QR codes with a rounded, bordered logo overlay, and decoding back to text."""

__version__ = "1.0.0"

from qrlogo.api import (  # noqa: E402
    DEFAULT_ERROR_CORRECTION,
    DEFAULT_LENGTH,
    create_qrcode,
    create_qrcode_matrix,
    decode_qrcode,
    generate_qrcode_image,
)
from qrlogo.codec import ECCLevel, QUIET_ZONE  # noqa: E402
from qrlogo.config import LogoConfig, OutputFormat  # noqa: E402
from qrlogo.errors import (  # noqa: E402
    CompositionFailure,
    DecodeFailure,
    DecoderUnavailable,
    EncodeFailure,
    InvalidArgument,
    InvalidDimension,
    InvalidImage,
    InvalidLogoConfig,
    NotFound,
    QRLogoError,
)
from qrlogo.matrix import ModuleMatrix  # noqa: E402

__all__ = [
    "DEFAULT_ERROR_CORRECTION",
    "DEFAULT_LENGTH",
    "QUIET_ZONE",
    "CompositionFailure",
    "DecodeFailure",
    "DecoderUnavailable",
    "ECCLevel",
    "EncodeFailure",
    "InvalidArgument",
    "InvalidDimension",
    "InvalidImage",
    "InvalidLogoConfig",
    "LogoConfig",
    "ModuleMatrix",
    "NotFound",
    "OutputFormat",
    "QRLogoError",
    "create_qrcode",
    "create_qrcode_matrix",
    "decode_qrcode",
    "generate_qrcode_image",
]
