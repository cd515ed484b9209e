"""Rasterizer: module matrix -> opaque RGBA image."""

import numpy as np
from PIL import Image

from qrlogo.config import BLACK, RGB, WHITE
from qrlogo.errors import InvalidDimension
from qrlogo.logging import audit, get_logger, trace
from qrlogo.matrix import ModuleMatrix

log = get_logger("raster")


def module_edges(modules: int, edge_length: int) -> np.ndarray:
    """Map every pixel index along one axis to the module that covers it.

    Pixel ``p`` belongs to module ``i`` when ``i*edge/n <= p < (i+1)*edge/n``,
    i.e. ``i = floor(p*n/edge)``. Block widths differ by at most one pixel
    when *edge_length* is not a multiple of *modules*.
    """
    return (np.arange(edge_length, dtype=np.int64) * modules) // edge_length


@trace
def render(
    matrix: ModuleMatrix,
    edge_length: int,
    foreground: RGB = BLACK,
    background: RGB = WHITE,
) -> Image.Image:
    """Render *matrix* as a square ``edge_length`` RGBA image.

    Nearest-neighbour scaling; every pixel is fully opaque.

    Raises:
        InvalidDimension: ``edge_length <= 0``.
    """
    if not isinstance(edge_length, int) or isinstance(edge_length, bool) or edge_length <= 0:
        raise InvalidDimension(f"edge length must be a positive integer, got {edge_length!r}")

    rows = module_edges(matrix.height, edge_length)
    cols = module_edges(matrix.width, edge_length)
    dark = matrix.array[rows[:, None], cols[None, :]]

    pixels = np.empty((edge_length, edge_length, 4), dtype=np.uint8)
    pixels[...] = (*background, 255)
    pixels[dark] = (*foreground, 255)

    audit("qr.rasterized", logger=log,
          modules=f"{matrix.width}x{matrix.height}",
          image_px=f"{edge_length}x{edge_length}",
          px_per_module=round(edge_length / matrix.width, 2))
    return Image.fromarray(pixels)
