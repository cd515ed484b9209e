"""Public operations: encode, render, serialize and decode QR codes."""

import io
import os
from typing import BinaryIO, Union

from PIL import Image, UnidentifiedImageError

from qrlogo.codec import ChainDecoder, ECCLevel, QRCodeEncoder, SymbolDecoder, SymbolEncoder, to_luminance
from qrlogo.compose import overlay
from qrlogo.config import BLACK, RGB, WHITE, LogoConfig, OutputFormat
from qrlogo.errors import DecodeFailure, InvalidArgument, InvalidDimension
from qrlogo.logging import audit, get_logger, trace
from qrlogo.logo import LogoSource, load_logo
from qrlogo.matrix import ModuleMatrix
from qrlogo.raster import render

log = get_logger("api")

DEFAULT_LENGTH = 400
DEFAULT_ERROR_CORRECTION = ECCLevel.H
DEFAULT_JPEG_QUALITY = 95

ImageSource = Union[str, os.PathLike, bytes, BinaryIO, Image.Image]


def _edge(edge_length: int | None) -> int:
    if edge_length is None:
        return DEFAULT_LENGTH
    if not isinstance(edge_length, int) or isinstance(edge_length, bool) or edge_length <= 0:
        raise InvalidDimension(f"edge length must be a positive integer, got {edge_length!r}")
    return edge_length


@trace
def create_qrcode_matrix(
    content: str,
    edge_length: int | None = None,
    error_correction: str | ECCLevel = DEFAULT_ERROR_CORRECTION,
    *,
    encoder: SymbolEncoder | None = None,
) -> ModuleMatrix:
    """Encode *content* (UTF-8) into a module matrix.

    *edge_length* is validated here so bad sizes fail before any encoding
    work; the matrix itself is in modules, not pixels.

    Raises:
        InvalidDimension: non-positive *edge_length*.
        EncodeFailure: empty content or content beyond symbol capacity.
    """
    _edge(edge_length)
    ecc = ECCLevel.parse(error_correction)
    encoder = encoder or QRCodeEncoder()
    return encoder.encode(content, ecc)


@trace
def generate_qrcode_image(
    content: str,
    edge_length: int | None = None,
    logo: LogoSource = None,
    logo_config: LogoConfig | None = None,
    *,
    error_correction: str | ECCLevel = DEFAULT_ERROR_CORRECTION,
    foreground: RGB = BLACK,
    background: RGB = WHITE,
    encoder: SymbolEncoder | None = None,
) -> Image.Image:
    """Render *content* as an RGBA QR code, with *logo* centred when given.

    Args:
        content: Text to encode.
        edge_length: Square image edge in pixels (default 400).
        logo: Path, encoded bytes, binary stream or PIL Image; None for no logo.
        logo_config: Border and sizing of the logo (defaults to LogoConfig()).

    Raises:
        InvalidArgument: bad size, missing logo file, invalid logo config.
        EncodeFailure: the encoder rejected *content*.
        CompositionFailure: the logo could not be read or drawn.
    """
    edge = _edge(edge_length)
    config = logo_config or LogoConfig()

    # Read the logo before encoding so a missing file fails first
    logo_img = load_logo(logo)

    matrix = create_qrcode_matrix(content, edge, error_correction, encoder=encoder)
    img = render(matrix, edge, foreground=foreground, background=background)
    if logo_img is not None:
        img = overlay(img, logo_img, config)
    return img


@trace
def create_qrcode(
    content: str,
    edge_length: int | None = None,
    logo: LogoSource = None,
    logo_config: LogoConfig | None = None,
    *,
    image_format: str | OutputFormat = OutputFormat.PNG,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    error_correction: str | ECCLevel = DEFAULT_ERROR_CORRECTION,
    encoder: SymbolEncoder | None = None,
) -> bytes:
    """Render *content* and serialize it (PNG unless JPEG is requested)."""
    fmt = OutputFormat.parse(image_format)
    img = generate_qrcode_image(
        content, edge_length, logo, logo_config,
        error_correction=error_correction, encoder=encoder,
    )

    buf = io.BytesIO()
    if fmt is OutputFormat.JPEG:
        img.convert("RGB").save(buf, format=fmt.value, quality=jpeg_quality)
    else:
        img.save(buf, format=fmt.value)
    data = buf.getvalue()

    audit("qr.serialized", logger=log, format=fmt.value, bytes=len(data),
          image_px=f"{img.size[0]}x{img.size[1]}")
    return data


def read_image(source: ImageSource) -> Image.Image:
    """Open an image to decode from a path, bytes, a binary stream or an Image.

    Raises:
        InvalidArgument: *source* is a path that does not exist.
        DecodeFailure: the data is not a readable image.
    """
    if isinstance(source, Image.Image):
        return source
    try:
        if isinstance(source, (str, os.PathLike)):
            path = os.fspath(source)
            if not os.path.isfile(path):
                raise InvalidArgument(f"image file not found: {path}")
            with Image.open(path) as img:
                img.load()
                return img.copy()
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        img = Image.open(source)
        img.load()
        return img
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeFailure(f"could not read image: {e}") from e


@trace
def decode_qrcode(source: ImageSource, *, decoder: SymbolDecoder | None = None) -> str:
    """Read the text stored in a QR code image.

    Raises:
        InvalidArgument: *source* is a path that does not exist.
        NotFound: no symbol located.
        DecodeFailure: unreadable image or symbol.
    """
    luminance = to_luminance(read_image(source))
    decoder = decoder or ChainDecoder()
    return decoder.decode(luminance)
