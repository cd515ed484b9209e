"""Straight-alpha source-over and source-atop."""

import numpy as np
import pytest
from PIL import Image

from qrlogo.blend import placed, source_atop, source_over


def _random_rgba(seed: int, size=(16, 12), opaque=False) -> Image.Image:
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(size[1], size[0], 4), dtype=np.uint8)
    if opaque:
        arr[..., 3] = 255
    return Image.fromarray(arr)


def _clear(size=(16, 12)) -> Image.Image:
    return Image.new("RGBA", size, (0, 0, 0, 0))


def test_over_with_transparent_source_is_identity():
    dst = _random_rgba(1)
    out = source_over(dst, _clear())
    assert np.array_equal(np.array(out), np.array(dst))


def test_over_with_opaque_source_replaces():
    src = _random_rgba(2, opaque=True)
    out = source_over(_random_rgba(3), src)
    assert np.array_equal(np.array(out), np.array(src))


def test_over_onto_transparent_copies_source():
    src = _random_rgba(4)
    out = np.array(source_over(_clear(), src))
    src_arr = np.array(src)
    assert np.array_equal(out[..., 3], src_arr[..., 3])
    visible = src_arr[..., 3] > 0
    assert np.array_equal(out[visible, :3], src_arr[visible, :3])


def test_over_half_alpha_mixes():
    dst = Image.new("RGBA", (1, 1), (255, 255, 255, 255))
    src = Image.new("RGBA", (1, 1), (0, 0, 0, 26))
    assert source_over(dst, src).getpixel((0, 0)) == (229, 229, 229, 255)


def test_atop_keeps_destination_alpha():
    dst = _random_rgba(5)
    out = source_atop(dst, _random_rgba(6))
    assert np.array_equal(np.array(out)[..., 3], np.array(dst)[..., 3])


def test_atop_with_transparent_source_is_identity():
    dst = _random_rgba(7, opaque=True)
    out = source_atop(dst, _clear())
    assert np.array_equal(np.array(out), np.array(dst))


def test_atop_opaque_source_on_opaque_destination():
    src = _random_rgba(8, opaque=True)
    out = source_atop(_random_rgba(9, opaque=True), src)
    assert np.array_equal(np.array(out), np.array(src))


def test_atop_draws_nothing_outside_destination():
    out = source_atop(_clear(), _random_rgba(10, opaque=True))
    assert (np.array(out)[..., 3] == 0).all()


def test_size_mismatch_rejected():
    with pytest.raises(ValueError):
        source_over(_clear((4, 4)), _clear((5, 4)))


def test_placed_positions_image():
    tile = Image.new("RGBA", (2, 2), (1, 2, 3, 255))
    layer = placed((6, 6), tile, (3, 1))
    arr = np.array(layer)
    assert tuple(arr[1, 3]) == (1, 2, 3, 255)
    assert tuple(arr[2, 4]) == (1, 2, 3, 255)
    assert arr[0, 0, 3] == 0
    assert arr[..., 3].sum() == 4 * 255
