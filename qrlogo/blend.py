"""Porter-Duff blend operations over straight-alpha RGBA images.

Both operations are pure: they read two same-sized RGBA images and return
a new one. Arithmetic runs in float64 on the 0-255 scale so that a fully
transparent source pixel reproduces the destination pixel exactly.
"""

import numpy as np
from PIL import Image


def _split(image: Image.Image) -> tuple[np.ndarray, np.ndarray]:
    arr = np.asarray(image.convert("RGBA"), dtype=np.float64)
    return arr[..., :3], arr[..., 3:] / 255.0


def _check_sizes(dst: Image.Image, src: Image.Image):
    if dst.size != src.size:
        raise ValueError(f"blend layers differ in size: {dst.size} vs {src.size}")


def _merge(color: np.ndarray, alpha: np.ndarray) -> Image.Image:
    out = np.empty(color.shape[:2] + (4,), dtype=np.uint8)
    out[..., :3] = np.clip(np.rint(color), 0, 255)
    out[..., 3] = np.clip(np.rint(alpha[..., 0] * 255.0), 0, 255)
    return Image.fromarray(out)


def source_over(dst: Image.Image, src: Image.Image) -> Image.Image:
    """*src* drawn over *dst*; transparent parts of *src* let *dst* through."""
    _check_sizes(dst, src)
    cs, a_s = _split(src)
    cd, a_d = _split(dst)

    a_o = a_s + a_d * (1.0 - a_s)
    weighted = cs * a_s + cd * a_d * (1.0 - a_s)
    with np.errstate(divide="ignore", invalid="ignore"):
        color = np.where(a_o > 0, weighted / a_o, cd)
    return _merge(color, a_o)


def source_atop(dst: Image.Image, src: Image.Image) -> Image.Image:
    """*src* drawn only where *dst* is already opaque.

    Output alpha equals *dst* alpha, so nothing appears outside the
    destination's coverage.
    """
    _check_sizes(dst, src)
    cs, a_s = _split(src)
    cd, a_d = _split(dst)

    color = np.where(a_d > 0, cs * a_s + cd * (1.0 - a_s), cd)
    out = _merge(color, a_d)
    # Keep destination alpha bit-exact
    out.putalpha(dst.convert("RGBA").getchannel("A"))
    return out


def placed(size: tuple[int, int], image: Image.Image, xy: tuple[int, int]) -> Image.Image:
    """Transparent layer of *size* with *image* copied in at *xy*."""
    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    layer.paste(image.convert("RGBA"), xy)
    return layer
