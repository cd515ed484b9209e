"""Shared fixtures: deterministic fake codec and sample logos."""

import hashlib
import io
import logging
import sys

import numpy as np
import pytest
from PIL import Image, ImageDraw

from qrlogo.codec import ChainDecoder, ECCLevel, OpenCVDecoder
from qrlogo.errors import EncodeFailure, NotFound
from qrlogo.matrix import ModuleMatrix


class FakeEncoder:
    """Hash-seeded module grid with a light quiet zone. Records every call."""

    def __init__(self, modules: int = 21, quiet_zone: int = 4):
        self.modules = modules
        self.quiet_zone = quiet_zone
        self.calls: list[tuple[str, ECCLevel]] = []

    def encode(self, text: str, ecc: ECCLevel) -> ModuleMatrix:
        self.calls.append((text, ecc))
        if not text:
            raise EncodeFailure(text, "content is empty")
        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
        rng = np.random.default_rng(seed)
        core = rng.random((self.modules, self.modules)) < 0.5
        return ModuleMatrix(np.pad(core, self.quiet_zone, constant_values=False))


class FixedDecoder:
    """Returns *text* for any grid containing a dark pixel."""

    def __init__(self, text: str, name: str = "fixed"):
        self.text = text
        self.name = name
        self.seen: list[np.ndarray] = []

    def decode(self, luminance: np.ndarray) -> str:
        self.seen.append(luminance)
        if not (luminance < 128).any():
            raise NotFound(f"{self.name}: blank image")
        return self.text


class MissingDecoder:
    name = "missing"

    def decode(self, luminance: np.ndarray) -> str:
        raise NotFound("missing: nothing here")


@pytest.fixture
def fake_encoder():
    return FakeEncoder()


@pytest.fixture
def logo_image() -> Image.Image:
    """64x64 opaque logo: pale blue tile with a dark disc."""
    img = Image.new("RGBA", (64, 64), (200, 220, 255, 255))
    ImageDraw.Draw(img).ellipse([16, 16, 47, 47], fill=(20, 40, 120, 255))
    return img


@pytest.fixture
def logo_png(logo_image) -> bytes:
    buf = io.BytesIO()
    logo_image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def logo_file(tmp_path, logo_png):
    path = tmp_path / "logo.png"
    path.write_bytes(logo_png)
    return path


@pytest.fixture(autouse=True)
def _reset_qrlogo_logger():
    """Undo any handlers the CLI installs so tests stay isolated."""
    root = logging.getLogger("qrlogo")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


def _have_zbar() -> bool:
    # pyzbar raises ImportError at import time when libzbar is missing
    try:
        import pyzbar.pyzbar  # noqa: F401
    except ImportError:
        return False
    return True


needs_zbar = pytest.mark.skipif(not _have_zbar(), reason="ZBar shared library not available")


@pytest.fixture
def no_zbar(monkeypatch):
    """Make ``import pyzbar.pyzbar`` fail the way it does without libzbar."""
    monkeypatch.setitem(sys.modules, "pyzbar.pyzbar", None)


@pytest.fixture(params=["default", "opencv"])
def round_trip_decoder(request):
    """Default chain, and an OpenCV-only chain that runs wherever cv2 does.

    ``None`` lets ``decode_qrcode`` build its default chain, which falls back
    to OpenCV when ZBar is missing.
    """
    if request.param == "opencv":
        return ChainDecoder([OpenCVDecoder()])
    return None
