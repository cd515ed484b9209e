import numpy as np
import pytest

from qrlogo.errors import InvalidDimension
from qrlogo.matrix import ModuleMatrix


def test_dimensions_and_indexing():
    m = ModuleMatrix.from_rows([[True, False, False], [False, False, True]])
    assert (m.width, m.height) == (3, 2)
    assert m[0, 0] is True
    assert m[2, 1] is True
    assert m[1, 0] is False


def test_backing_array_is_read_only_copy():
    src = np.zeros((3, 3), dtype=bool)
    m = ModuleMatrix(src)
    src[0, 0] = True
    assert m[0, 0] is False
    with pytest.raises(ValueError):
        m.array[1, 1] = True


def test_equality_and_hash():
    a = ModuleMatrix([[True, False], [False, True]])
    b = ModuleMatrix([[True, False], [False, True]])
    c = ModuleMatrix([[False, False], [False, True]])
    assert a == b
    assert hash(a) == hash(b)
    assert a != c


@pytest.mark.parametrize("rows", [[], [[]], [True, False]])
def test_rejects_empty_or_flat(rows):
    with pytest.raises(InvalidDimension):
        ModuleMatrix(rows)


def test_to_text():
    m = ModuleMatrix([[True, False]])
    assert m.to_text(dark="#", light=".") == "#."
