"""Compositor: shadow, rounded logo and two-tone border over the QR raster."""

from dataclasses import dataclass

from PIL import Image, ImageDraw

from qrlogo.blend import placed, source_atop, source_over
from qrlogo.config import BLACK, GRAY, LogoConfig
from qrlogo.errors import CompositionFailure, InvalidArgument, InvalidLogoConfig
from qrlogo.logging import audit, get_logger, trace
from qrlogo.logo import clip_round, corner_radius

log = get_logger("compose")

SHADOW_OFFSET = 10
SHADOW_ALPHA = 26  # ~10% black


@dataclass(frozen=True)
class LogoRegion:
    """Where the logo lands on a canvas."""

    x: int
    y: int
    width: int
    height: int
    radius: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Inclusive ``[x0, y0, x1, y1]`` as ImageDraw expects."""
        return (self.x, self.y, self.x + self.width - 1, self.y + self.height - 1)

    def footprint(self) -> tuple[int, int, int, int]:
        """Half-open ``(left, top, right, bottom)`` of every pixel the overlay may touch.

        The logo rectangle extended downward by the shadow offset; the
        shadow is narrower than the logo so it never widens the footprint.
        """
        return (self.x, self.y, self.x + self.width, self.y + self.height + SHADOW_OFFSET)


def logo_region(canvas_size: tuple[int, int], config: LogoConfig) -> LogoRegion:
    """Centered logo rectangle for a canvas of *canvas_size*."""
    if config.logo_fraction < 2:
        raise InvalidLogoConfig(f"logo_fraction must be >= 2, got {config.logo_fraction}")
    cw, ch = canvas_size
    width = cw // config.logo_fraction
    height = ch // config.logo_fraction
    if width <= 0 or height <= 0:
        raise InvalidArgument(
            f"canvas {cw}x{ch} is too small for a logo at 1/{config.logo_fraction} of its edge"
        )
    return LogoRegion(
        x=(cw - width) // 2,
        y=(ch - height) // 2,
        width=width,
        height=height,
        radius=corner_radius(width, height),
    )


def _shadow_layer(size: tuple[int, int], region: LogoRegion) -> Image.Image:
    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    x0 = region.x + SHADOW_OFFSET
    y0 = region.y + SHADOW_OFFSET
    w = region.width - 2 * SHADOW_OFFSET
    if w > 0:
        ImageDraw.Draw(layer).rounded_rectangle(
            [x0, y0, x0 + w - 1, y0 + region.height - 1],
            radius=min(region.radius, w // 2, region.height // 2),
            fill=(*BLACK, SHADOW_ALPHA),
        )
    return layer


def _border_layer(size: tuple[int, int], region: LogoRegion, config: LogoConfig) -> Image.Image:
    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    border = config.border_width

    # Strokes are drawn inward so the frame never leaves the logo rectangle
    stroke = min(border, region.width // 2, region.height // 2)
    if stroke > 0:
        draw.rounded_rectangle(region.box, radius=region.radius, outline=(*config.border_color, 255), width=stroke)

    inset = border // 2
    iw = region.width - border
    ih = region.height - border
    if iw > 0 and ih > 0:
        ix, iy = region.x + inset, region.y + inset
        draw.rounded_rectangle(
            [ix, iy, ix + iw - 1, iy + ih - 1],
            radius=min(region.radius, iw // 2, ih // 2),
            outline=(*GRAY, 255),
            width=1,
        )
    return layer


@trace
def overlay(base: Image.Image, logo: Image.Image, config: LogoConfig | None = None) -> Image.Image:
    """Composite *logo* onto the centre of *base* and return the result.

    Layers, bottom to top, on a transparent scratch canvas: translucent
    shadow offset by (+10, +10), the rounded logo scaled to the logo
    rectangle, the configured border, and a 1px gray inner outline. The
    scratch canvas is then blended onto *base* source-atop. *base* is not
    modified.

    Raises:
        InvalidLogoConfig: ``logo_fraction < 2``.
        InvalidArgument: canvas too small to hold a logo.
        CompositionFailure: any unexpected failure while drawing.
    """
    config = config or LogoConfig()
    region = logo_region(base.size, config)

    try:
        rounded = clip_round(logo)
        fitted = rounded.resize((region.width, region.height), Image.LANCZOS)

        scratch = Image.new("RGBA", base.size, (0, 0, 0, 0))
        scratch = source_over(scratch, _shadow_layer(base.size, region))
        scratch = source_over(scratch, placed(base.size, fitted, (region.x, region.y)))
        scratch = source_over(scratch, _border_layer(base.size, region, config))

        result = source_atop(base.convert("RGBA"), scratch)
    except InvalidArgument:
        raise
    except Exception as e:
        raise CompositionFailure(f"failed to overlay logo: {e}") from e

    audit(
        "logo.composited", logger=log,
        canvas=f"{base.size[0]}x{base.size[1]}",
        logo_rect=f"{region.width}x{region.height}@{region.x},{region.y}",
        radius=region.radius,
        border=config.border_width,
        logo_fraction=config.logo_fraction,
    )
    return result
