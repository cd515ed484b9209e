"""Codec boundary: text <-> module matrix / luminance grid <-> text.

The symbol algorithms themselves live in third-party libraries. This module
defines the two capabilities the rest of the package depends on and the
default implementations behind them:

    SymbolEncoder   qrcode  (python-qrcode)
    SymbolDecoder   pyzbar  (ZBar), then OpenCV's QRCodeDetector
"""

from collections.abc import Sequence
from enum import Enum
from typing import Protocol, runtime_checkable

import cv2
import numpy as np
import qrcode
import qrcode.constants
import qrcode.exceptions
import qrcode.util
from PIL import Image

from qrlogo.errors import DecodeFailure, DecoderUnavailable, EncodeFailure, InvalidArgument, NotFound
from qrlogo.logging import audit, get_logger
from qrlogo.matrix import ModuleMatrix

log = get_logger("codec")

CHARSET = "utf-8"
QUIET_ZONE = 4


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%

    @classmethod
    def parse(cls, level: "str | ECCLevel") -> "ECCLevel":
        if isinstance(level, cls):
            return level
        try:
            return cls[str(level).strip().upper()]
        except KeyError:
            raise InvalidArgument(f"unknown error-correction level {level!r}, expected L, M, Q or H") from None


@runtime_checkable
class SymbolEncoder(Protocol):
    def encode(self, text: str, ecc: ECCLevel) -> ModuleMatrix:
        """Encode *text* as UTF-8. Raise EncodeFailure if it cannot be encoded."""
        ...


@runtime_checkable
class SymbolDecoder(Protocol):
    name: str

    def decode(self, luminance: np.ndarray) -> str:
        """Decode a 2-D uint8 luminance grid. Raise NotFound or DecodeFailure."""
        ...


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

class QRCodeEncoder:
    """Encoder backed by python-qrcode, always in UTF-8 byte mode."""

    def __init__(self, quiet_zone: int = QUIET_ZONE):
        self.quiet_zone = quiet_zone

    def encode(self, text: str, ecc: ECCLevel) -> ModuleMatrix:
        if not text:
            raise EncodeFailure(text, "content is empty")

        qr = qrcode.QRCode(
            version=None,
            error_correction=ecc.value,
            box_size=1,
            border=self.quiet_zone,
        )
        try:
            qr.add_data(qrcode.util.QRData(text.encode(CHARSET), mode=qrcode.util.MODE_8BIT_BYTE))
            qr.make(fit=True)
        except (qrcode.exceptions.DataOverflowError, ValueError) as e:
            raise EncodeFailure(text, str(e) or type(e).__name__) from e

        matrix = ModuleMatrix(qr.get_matrix())
        audit("qr.encoded", logger=log,
              data=text[:80], version=qr.version, ecc=ecc.name,
              modules=f"{matrix.width}x{matrix.height}")
        return matrix


# ---------------------------------------------------------------------------
# Luminance extraction
# ---------------------------------------------------------------------------

def to_luminance(image: Image.Image) -> np.ndarray:
    """Convert *image* to a 2-D uint8 luminance grid.

    Transparent areas are flattened onto white first, so a logo's clipped
    corners read as light modules rather than black.
    """
    rgba = image.convert("RGBA")
    flat = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
    flat.alpha_composite(rgba)
    arr = np.array(flat.convert("RGB"))
    return cv2.cvtColor(arr, cv2.COLOR_RGB2GRAY)


def _text_from_bytes(raw: bytes, decoder: str) -> str:
    try:
        return raw.decode(CHARSET)
    except UnicodeDecodeError as e:
        raise DecodeFailure(f"{decoder}: payload is not valid {CHARSET}") from e


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class PyzbarDecoder:
    """ZBar via pyzbar. Binarization and localisation happen inside ZBar."""

    name = "pyzbar/zbar"

    def decode(self, luminance: np.ndarray) -> str:
        # pyzbar loads libzbar at import time; a missing library is a decoder failure
        try:
            from pyzbar.pyzbar import ZBarSymbol
            from pyzbar.pyzbar import decode as pyzbar_decode
        except ImportError as e:
            raise DecoderUnavailable(f"{self.name}: ZBar library unavailable") from e

        results = pyzbar_decode(np.ascontiguousarray(luminance, dtype=np.uint8), symbols=[ZBarSymbol.QRCODE])
        if not results:
            raise NotFound(f"{self.name}: no QR code detected")
        return _text_from_bytes(results[0].data, self.name)


class OpenCVDecoder:
    """OpenCV's built-in QR detector."""

    name = "opencv"

    def decode(self, luminance: np.ndarray) -> str:
        detector = cv2.QRCodeDetector()
        try:
            data, points, _ = detector.detectAndDecode(luminance)
        except cv2.error as e:
            raise DecodeFailure(f"{self.name}: {e}") from e
        if points is None:
            raise NotFound(f"{self.name}: no QR code detected")
        if not data:
            raise DecodeFailure(f"{self.name}: QR code located but could not be decoded")
        return data


class ChainDecoder:
    """Try each decoder in order; the first successful read wins."""

    name = "chain"

    def __init__(self, decoders: Sequence[SymbolDecoder] | None = None):
        self.decoders = list(decoders) if decoders is not None else [PyzbarDecoder(), OpenCVDecoder()]

    def decode(self, luminance: np.ndarray) -> str:
        failures = []
        for decoder in self.decoders:
            try:
                text = decoder.decode(luminance)
            except DecodeFailure as e:
                log.debug("decoder %s failed: %s", decoder.name, e)
                failures.append(e)
                continue
            audit("qr.decoded", logger=log, decoder=decoder.name, data=text[:80])
            return text

        # decoders that could not load say nothing about the image
        ran = [e for e in failures if not isinstance(e, DecoderUnavailable)]
        if ran and all(isinstance(e, NotFound) for e in ran):
            raise NotFound("no QR code detected: " + "; ".join(str(e) for e in failures))
        raise DecodeFailure("QR code could not be decoded: " + "; ".join(str(e) for e in failures))
