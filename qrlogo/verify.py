"""Scan verification: run every decoder against an image and report each result."""

import time
from dataclasses import dataclass

from PIL import Image

from qrlogo.codec import OpenCVDecoder, PyzbarDecoder, SymbolDecoder, to_luminance
from qrlogo.errors import DecodeFailure
from qrlogo.logging import audit, get_logger, trace

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


def scan(image: Image.Image, decoder: SymbolDecoder) -> ScanResult:
    """Decode *image* with one decoder, timing the attempt."""
    luminance = to_luminance(image)
    start = time.perf_counter()
    try:
        data = decoder.decode(luminance)
    except DecodeFailure as e:
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.verified", logger=log, decoder=decoder.name, success=False,
              time_ms=round(elapsed, 1), error=str(e))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder.name, error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    audit("scan.verified", logger=log, decoder=decoder.name, success=True,
          time_ms=round(elapsed, 1), data=data[:80])
    return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=decoder.name)


@trace
def verify(
    image: Image.Image,
    expected_data: str | None = None,
    decoders: list[SymbolDecoder] | None = None,
) -> list[ScanResult]:
    """Run each decoder independently on *image*.

    Args:
        image: PIL Image containing a QR code.
        expected_data: If given, a successful read of different text counts as a failure.
        decoders: Defaults to pyzbar and OpenCV.

    Returns:
        One ScanResult per decoder, in order.
    """
    if decoders is None:
        decoders = [PyzbarDecoder(), OpenCVDecoder()]

    results = []
    for decoder in decoders:
        result = scan(image, decoder)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{expected_data}'"
        results.append(result)
    return results
