"""Value objects that parameterise rendering and serialization."""

from dataclasses import dataclass
from enum import Enum

from qrlogo.errors import InvalidArgument, InvalidLogoConfig

RGB = tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)
GRAY: RGB = (128, 128, 128)

DEFAULT_BORDER_WIDTH = 5
DEFAULT_LOGO_FRACTION = 5


def _check_color(name: str, color) -> RGB:
    if len(color) != 3 or not all(isinstance(c, int) and 0 <= c <= 255 for c in color):
        raise InvalidLogoConfig(f"{name} must be three 0-255 integers, got {color!r}")
    return tuple(color)


@dataclass(frozen=True)
class LogoConfig:
    """How the logo is framed on the QR code.

    Attributes:
        border_width:  Stroke width of the outer border in pixels.
        border_color:  RGB colour of the outer border.
        logo_fraction: Logo edge = canvas edge // logo_fraction. Must be >= 2
                       so the logo never covers more than half the canvas edge.
    """

    border_width: int = DEFAULT_BORDER_WIDTH
    border_color: RGB = WHITE
    logo_fraction: int = DEFAULT_LOGO_FRACTION

    def __post_init__(self):
        if self.logo_fraction < 2:
            raise InvalidLogoConfig(
                f"logo_fraction must be >= 2, got {self.logo_fraction} (logo would exceed half the canvas)"
            )
        if self.border_width < 0:
            raise InvalidLogoConfig(f"border_width must be >= 0, got {self.border_width}")
        object.__setattr__(self, "border_color", _check_color("border_color", self.border_color))


class OutputFormat(Enum):
    """Serialization format for rendered codes.

    PNG is lossless and the default. JPEG can blur module edges into gray
    and is only used when asked for explicitly.
    """

    PNG = "PNG"
    JPEG = "JPEG"

    @classmethod
    def parse(cls, name: "str | OutputFormat") -> "OutputFormat":
        if isinstance(name, cls):
            return name
        key = name.strip().upper()
        if key == "JPG":
            key = "JPEG"
        try:
            return cls[key]
        except KeyError:
            raise InvalidArgument(f"unsupported output format {name!r}, expected one of png, jpeg") from None
