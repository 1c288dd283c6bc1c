#!/usr/bin/env -S uv run --script
# /// script
# requires-python = ">=3.10"
# dependencies = [
#   "pillow>=11.0",
#   "numpy>=2.0",
# ]
# ///
"""Generate the default AppIcon: gradient background, glass card, white sparkles.

Usage:
  scripts/generate_default_icon.py                      # assets/icons/AppIcon-1024.png
  scripts/generate_default_icon.py path/to/Icon.png -v
"""

from __future__ import annotations

import argparse
import io
import math
import os
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont, ImageOps

SIZE = 1024
DEFAULT_OUTPUT = "assets/icons/AppIcon-1024.png"

# Calibrated RGB, 0-1 range
GRADIENT_COLORS = [(0.09, 0.28, 0.72), (0.16, 0.12, 0.33)]
GRADIENT_ANGLE = -45.0

CARD_INSET = 90
CARD_RADIUS = 210
CARD_OPACITY = 0.08

SYMBOL_NAME = "sparkles"
SYMBOL_POINT_SIZE = 440
SYMBOL_WEIGHT = "medium"
SYMBOL_RECT = (292, 292, 440, 440)  # x, y, w, h

FALLBACK_TEXT = "APP"
FALLBACK_FONT_SIZE = 220
# (210, 360, 604, 260) with a bottom-left origin, flipped to image coordinates
FALLBACK_RECT = (210, SIZE - 360 - 260, 604, 260)

WHITE = (255, 255, 255, 255)

SYMBOLS = {
    "sparkles": "✦",  # BLACK FOUR POINTED STAR
}

SYMBOL_FONTS = {
    "regular": [
        "/System/Library/Fonts/Apple Symbols.ttf",
        "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    ],
    "medium": [
        "/System/Library/Fonts/Apple Symbols.ttf",
        "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    ],
}

BOLD_FONTS = [
    "/System/Library/Fonts/SFNS.ttf",
    "/Library/Fonts/SF-Pro-Display-Bold.otf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/liberation-sans/LiberationSans-Bold.ttf",
    "/usr/share/fonts/opentype/noto/NotoSans-Bold.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Bold.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]


class IconError(Exception):
    """Base class for failures that abort icon generation."""


class DirectoryCreationError(IconError):
    pass


class EncodingError(IconError):
    pass


class WriteError(IconError):
    pass


def to_rgba(color: tuple, alpha: float = 1.0) -> tuple[int, int, int, int]:
    r, g, b = (round(c * 255) for c in color)
    return (r, g, b, round(alpha * 255))


class Canvas:
    """Fixed-size RGBA surface. Drawing is only allowed while focused."""

    def __init__(self, size: int):
        self.size = size
        self.image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        self._draw: ImageDraw.ImageDraw | None = None

    @contextmanager
    def focus(self):
        if self._draw is not None:
            raise RuntimeError("canvas is already focused")
        self._draw = ImageDraw.Draw(self.image)
        try:
            yield self
        finally:
            self._draw = None

    @property
    def focused(self) -> bool:
        return self._draw is not None

    @property
    def draw(self) -> ImageDraw.ImageDraw:
        if self._draw is None:
            raise RuntimeError("canvas must be focused before drawing")
        return self._draw

    def composite(self, layer: Image.Image, dest: tuple[int, int] = (0, 0)):
        if self._draw is None:
            raise RuntimeError("canvas must be focused before drawing")
        self.image.alpha_composite(layer, dest=dest)


def make_gradient(size: int, colors: list, angle: float) -> Image.Image | None:
    """Linear gradient across the full square, or None if it can't be built.

    `angle` follows the AppKit convention (degrees, counter-clockwise, y up),
    so -45 runs from the top-left corner to the bottom-right corner.
    """
    if size <= 0 or len(colors) < 2:
        return None

    start = np.array(to_rgba(colors[0]), dtype=np.float64)
    end = np.array(to_rgba(colors[-1]), dtype=np.float64)

    # Project each pixel centre onto the gradient direction (y flipped).
    rad = math.radians(angle)
    dx, dy = math.cos(rad), -math.sin(rad)
    coords = np.arange(size, dtype=np.float64)
    proj = coords[np.newaxis, :] * dx + coords[:, np.newaxis] * dy
    lo, hi = proj.min(), proj.max()
    t = (proj - lo) / (hi - lo) if hi > lo else np.zeros_like(proj)

    arr = start + (end - start) * t[..., np.newaxis]
    return Image.fromarray(np.rint(arr).astype(np.uint8), "RGBA")


def glyph_bitmap(font: ImageFont.FreeTypeFont, char: str) -> Image.Image | None:
    bb = font.getbbox(char)
    w, h = bb[2] - bb[0], bb[3] - bb[1]
    if w <= 0 or h <= 0:
        return None
    img = Image.new("L", (w, h), 0)
    ImageDraw.Draw(img).text((-bb[0], -bb[1]), char, fill=255, font=font)
    return img


def has_glyph(font: ImageFont.FreeTypeFont, char: str) -> bool:
    """True if `font` draws `char` as something other than its missing-glyph box."""
    glyph = glyph_bitmap(font, char)
    if glyph is None or glyph.getbbox() is None:
        return False
    # Private-use codepoint, never mapped in system fonts
    missing = glyph_bitmap(font, "\U0010fffd")
    if missing is None:
        return True
    return glyph.size != missing.size or glyph.tobytes() != missing.tobytes()


def find_font(paths: list[str], size: int, char: str | None = None) -> ImageFont.FreeTypeFont | None:
    for p in paths:
        try:
            f = ImageFont.truetype(p, size)
        except (OSError, IOError):
            continue
        if char is None or has_glyph(f, char):
            return f
    return None


def load_symbol(name: str, point_size: int, weight: str) -> Image.Image | None:
    """Render a named symbol white on transparent, or None if unavailable."""
    char = SYMBOLS.get(name)
    if char is None:
        return None
    font = find_font(SYMBOL_FONTS.get(weight, SYMBOL_FONTS["regular"]), point_size, char)
    if font is None:
        return None

    mask = glyph_bitmap(font, char)
    if mask is None:
        return None
    tinted = Image.new("RGBA", mask.size, WHITE)
    tinted.putalpha(mask)
    return tinted


def paint_background(canvas: Canvas):
    gradient = make_gradient(canvas.size, GRADIENT_COLORS, GRADIENT_ANGLE)
    if gradient is not None:
        canvas.composite(gradient)
    else:
        canvas.draw.rectangle([0, 0, canvas.size - 1, canvas.size - 1], fill=to_rgba(GRADIENT_COLORS[0]))


def paint_card(canvas: Canvas):
    # Translucent fill has to be blended, not written straight into the pixels
    layer = Image.new("RGBA", canvas.image.size, (255, 255, 255, 0))
    far = canvas.size - CARD_INSET - 1
    ImageDraw.Draw(layer).rounded_rectangle(
        [CARD_INSET, CARD_INSET, far, far],
        radius=CARD_RADIUS,
        fill=to_rgba((1.0, 1.0, 1.0), CARD_OPACITY),
    )
    canvas.composite(layer)


def paint_symbol(canvas: Canvas, symbol: Image.Image):
    x, y, w, h = SYMBOL_RECT
    fitted = ImageOps.contain(symbol, (w, h), Image.Resampling.LANCZOS)
    dest = (x + (w - fitted.width) // 2, y + (h - fitted.height) // 2)
    canvas.composite(fitted, dest)


def paint_fallback_text(canvas: Canvas):
    font = find_font(BOLD_FONTS, FALLBACK_FONT_SIZE) or ImageFont.load_default(FALLBACK_FONT_SIZE)
    x, y, w, h = FALLBACK_RECT
    bb = canvas.draw.textbbox((0, 0), FALLBACK_TEXT, font=font)
    tw, th = bb[2] - bb[0], bb[3] - bb[1]
    tx = x + (w - tw) // 2 - bb[0]
    ty = y + (h - th) // 2 - bb[1]
    canvas.draw.text((tx, ty), FALLBACK_TEXT, fill=WHITE, font=font)


def render_icon(verbose: bool = False) -> Image.Image:
    def step(msg: str):
        if verbose:
            print(f"  {msg}...", file=sys.stderr)

    canvas = Canvas(SIZE)
    with canvas.focus():
        step("Background")
        paint_background(canvas)

        step("Card")
        paint_card(canvas)

        step("Symbol")
        symbol = load_symbol(SYMBOL_NAME, SYMBOL_POINT_SIZE, SYMBOL_WEIGHT)
        if symbol is not None:
            paint_symbol(canvas, symbol)
        else:
            step("Symbol unavailable, drawing text")
            paint_fallback_text(canvas)

    return canvas.image


def encode_png(image: Image.Image) -> bytes | None:
    """PNG bytes for `image`, or None if the encoder produced nothing."""
    buf = io.BytesIO()
    try:
        image.save(buf, "PNG")
    except (OSError, ValueError):
        return None
    return buf.getvalue() or None


def write_icon(data: bytes, path: Path):
    """Write via a unique hidden temp file next to `path`, then rename over it."""
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(data)
        # mkstemp files are 0600
        os.chmod(tmp_path, 0o644)
        tmp_path.replace(path)
    except OSError as err:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise WriteError(f"Failed to write icon: {err}") from err


def generate_icon(output: str | Path, verbose: bool = False) -> Path:
    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise DirectoryCreationError(f"Failed to create directory {path.parent}: {err}") from err

    image = render_icon(verbose=verbose)

    if verbose:
        print("  Encoding...", file=sys.stderr)
    data = encode_png(image)
    if data is None:
        raise EncodingError("Failed to render icon image.")

    write_icon(data, path)
    return path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_OUTPUT,
        help=f"Destination PNG (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print drawing steps to stderr",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        generate_icon(args.output, verbose=args.verbose)
    except IconError as err:
        print(err, file=sys.stderr)
        return 1

    print(f"Generated default icon at {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
