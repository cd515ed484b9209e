"""Module-to-pixel scaling and rendering."""

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from qrlogo.errors import InvalidDimension
from qrlogo.matrix import ModuleMatrix
from qrlogo.raster import module_edges, render


CHECKER = ModuleMatrix([[True, False], [False, True]])


def test_exact_multiple_renders_uniform_blocks():
    img = render(CHECKER, 4)
    px = np.array(img)

    assert img.mode == "RGBA"
    assert img.size == (4, 4)
    assert (px[..., 3] == 255).all()
    assert (px[:2, :2, :3] == 0).all()
    assert (px[:2, 2:, :3] == 255).all()
    assert (px[2:, :2, :3] == 255).all()
    assert (px[2:, 2:, :3] == 0).all()


def test_non_multiple_edge_uses_floor_partition():
    # 3 modules over 10 px: boundaries at 10/3 and 20/3
    assert module_edges(3, 10).tolist() == [0, 0, 0, 0, 1, 1, 1, 2, 2, 2]


def test_custom_colours():
    img = render(CHECKER, 2, foreground=(10, 20, 30), background=(200, 210, 220))
    px = np.array(img)
    assert tuple(px[0, 0]) == (10, 20, 30, 255)
    assert tuple(px[0, 1]) == (200, 210, 220, 255)


@pytest.mark.parametrize("edge", [0, -5, True, 2.0])
def test_invalid_edge_rejected(edge):
    with pytest.raises(InvalidDimension):
        render(CHECKER, edge)


def test_empty_matrix_rejected():
    with pytest.raises(InvalidDimension):
        ModuleMatrix([])


@settings(max_examples=50, deadline=None)
@given(
    modules=st.integers(min_value=1, max_value=40),
    edge=st.integers(min_value=1, max_value=300),
)
def test_every_pixel_maps_to_a_module_in_order(modules, edge):
    idx = module_edges(modules, edge)
    assert len(idx) == edge
    assert idx[0] == 0
    assert idx.max() <= modules - 1
    assert (np.diff(idx) >= 0).all()
    if edge >= modules:
        # no module is skipped and blocks differ by at most one pixel
        counts = np.bincount(idx, minlength=modules)
        assert counts.min() >= 1
        assert counts.max() - counts.min() <= 1


@settings(max_examples=25, deadline=None)
@given(
    grid=st.lists(st.lists(st.booleans(), min_size=5, max_size=5), min_size=5, max_size=5),
    edge=st.integers(min_value=5, max_value=120),
)
def test_pixels_follow_their_module(grid, edge):
    matrix = ModuleMatrix(grid)
    px = np.array(render(matrix, edge))
    idx = module_edges(5, edge)
    for y in range(0, edge, 7):
        for x in range(0, edge, 7):
            dark = matrix[int(idx[x]), int(idx[y])]
            assert px[y, x, 0] == (0 if dark else 255)
