"""Logo loading and rounded-corner clipping."""

import io
import os
from typing import BinaryIO, Union

import numpy as np
from PIL import Image, ImageDraw, UnidentifiedImageError

from qrlogo.errors import CompositionFailure, InvalidArgument, InvalidImage
from qrlogo.logging import audit, get_logger, trace

log = get_logger("logo")

# Absent, file reference, encoded bytes, open binary stream, or decoded image
LogoSource = Union[None, str, os.PathLike, bytes, BinaryIO, Image.Image]

# Supersampling factor for the anti-aliased corner mask
_SUPERSAMPLE = 4


def corner_radius(width: int, height: int | None = None) -> int:
    """Corner radius used for a logo ``width`` pixels wide: ``width // 10``.

    Clamped to half the shorter side so very wide logos still get a valid
    rounded rectangle.
    """
    radius = width // 10
    if height is not None:
        radius = min(radius, min(width, height) // 2)
    return radius


def _open(fp) -> Image.Image:
    img = Image.open(fp)
    img.load()
    return img.convert("RGBA")


@trace
def load_logo(source: LogoSource) -> Image.Image | None:
    """Decode a logo from any supported source into an RGBA image.

    Files are opened and closed inside this call. Streams are read but left
    open for the caller who owns them.

    Returns:
        The RGBA logo, or ``None`` when *source* is ``None``.

    Raises:
        InvalidArgument: the path does not exist or the source type is unknown.
        CompositionFailure: the data could not be decoded as an image.
    """
    if source is None:
        return None

    try:
        if isinstance(source, Image.Image):
            img = source.convert("RGBA")
            origin = "image"
        elif isinstance(source, (str, os.PathLike)):
            path = os.fspath(source)
            if not os.path.isfile(path):
                raise InvalidArgument(f"logo file not found: {path}")
            with open(path, "rb") as fh:
                img = _open(fh)
            origin = path
        elif isinstance(source, (bytes, bytearray, memoryview)):
            img = _open(io.BytesIO(bytes(source)))
            origin = "bytes"
        elif hasattr(source, "read"):
            img = _open(source)
            origin = "stream"
        else:
            raise InvalidArgument(f"unsupported logo source type: {type(source).__name__}")
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise CompositionFailure(f"could not read logo image: {e}") from e

    audit("logo.loaded", logger=log, origin=origin, size=f"{img.size[0]}x{img.size[1]}", mode=img.mode)
    return img


def _outside_corners(size: tuple[int, int], radius: int) -> np.ndarray:
    """Pixels whose centre lies outside the rounded rectangle ``[0, w-1] x [0, h-1]``.

    Centres sit on integer coordinates, as in Pillow's drawing model, so the
    four extreme corner pixels are outside for any radius above zero.
    """
    w, h = size
    ys, xs = np.ogrid[:h, :w]
    dx = np.maximum(np.maximum(radius - xs, xs - (w - 1 - radius)), 0)
    dy = np.maximum(np.maximum(radius - ys, ys - (h - 1 - radius)), 0)
    return dx * dx + dy * dy > radius * radius


def rounded_mask(size: tuple[int, int], radius: int) -> Image.Image:
    """Anti-aliased mode 'L' mask of a rounded rectangle filling *size*.

    Drawn at 4x and box-filtered down, so each value is the area fraction of
    the pixel inside the shape (0 = outside, 255 = fully inside). Pixels whose
    centre falls outside a corner arc are then forced to 0.
    """
    w, h = size
    ss = _SUPERSAMPLE
    big = Image.new("L", (w * ss, h * ss), 0)
    ImageDraw.Draw(big).rounded_rectangle(
        [0, 0, w * ss - 1, h * ss - 1],
        radius=radius * ss,
        fill=255,
    )
    mask = np.array(big.resize((w, h), Image.BOX))
    mask[_outside_corners((w, h), radius)] = 0
    return Image.fromarray(mask)


@trace
def clip_round(logo: Image.Image) -> Image.Image:
    """Return a copy of *logo* with rounded, transparent corners.

    Corner radius is ``width // 10``. Pixels fully inside keep their colour
    and alpha; pixels outside become transparent; boundary pixels keep
    ``alpha * coverage``. A pixel whose centre lies outside a corner arc is
    always fully transparent, so the four corner pixels are cleared whenever
    the radius is non-zero. Alpha is straight (not premultiplied).

    Raises:
        InvalidImage: zero width or height.
    """
    w, h = logo.size
    if w <= 0 or h <= 0:
        raise InvalidImage(f"logo has zero size: {w}x{h}")

    radius = corner_radius(w, h)
    mask = np.asarray(rounded_mask((w, h), radius), dtype=np.uint16)

    rgba = np.array(logo.convert("RGBA"))
    alpha = rgba[..., 3].astype(np.uint16)
    rgba[..., 3] = ((alpha * mask + 127) // 255).astype(np.uint8)

    audit("logo.clipped", logger=log, size=f"{w}x{h}", radius=radius)
    return Image.fromarray(rgba)
