"""Immutable boolean module grid produced by the symbol encoder."""

from collections.abc import Iterable, Sequence

import numpy as np

from qrlogo.errors import InvalidDimension


class ModuleMatrix:
    """``width x height`` grid of modules, ``True`` = dark.

    The backing numpy array is a private copy flagged read-only, so a matrix
    can be handed to several renderers without defensive copies.
    """

    __slots__ = ("_modules",)

    def __init__(self, modules: "np.ndarray | Sequence[Sequence[bool]]"):
        arr = np.array(modules, dtype=bool)
        if arr.ndim != 2 or arr.size == 0:
            raise InvalidDimension(f"module matrix must be a non-empty 2-D grid, got shape {arr.shape}")
        arr.setflags(write=False)
        self._modules = arr

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[bool]]) -> "ModuleMatrix":
        return cls([list(r) for r in rows])

    @property
    def width(self) -> int:
        return self._modules.shape[1]

    @property
    def height(self) -> int:
        return self._modules.shape[0]

    @property
    def array(self) -> np.ndarray:
        """Read-only ``(height, width)`` bool array."""
        return self._modules

    def __getitem__(self, pos: tuple[int, int]) -> bool:
        x, y = pos
        return bool(self._modules[y, x])

    def __eq__(self, other):
        if not isinstance(other, ModuleMatrix):
            return NotImplemented
        return np.array_equal(self._modules, other._modules)

    def __hash__(self):
        return hash((self._modules.shape, self._modules.tobytes()))

    def __repr__(self):
        return f"ModuleMatrix({self.width}x{self.height}, dark={int(self._modules.sum())})"

    def to_text(self, dark: str = "██", light: str = "  ") -> str:
        """Render the grid as text, one row per line (handy in failing test output)."""
        return "\n".join("".join(dark if v else light for v in row) for row in self._modules)
