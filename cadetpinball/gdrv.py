"""Indexed and true-colour bitmaps, palettes and simple blitting."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar, Optional, Sequence

PALETTE_SIZE = 256

_ALPHA_SHIFT = 24
_RED_SHIFT = 16
_GREEN_SHIFT = 8
_BLUE_SHIFT = 0


def _channel(value: int, name: str) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} channel out of range: {value}")
    return value


@dataclass(frozen=True)
class ColorRgba:
    """A packed 32-bit colour: alpha, red, green, blue from high to low byte."""

    color: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.color <= 0xFFFFFFFF:
            raise ValueError(f"colour out of range: {self.color:#x}")

    @classmethod
    def from_rgba(cls, red: int, green: int, blue: int, alpha: int) -> "ColorRgba":
        return cls(
            _channel(alpha, "alpha") << _ALPHA_SHIFT
            | _channel(red, "red") << _RED_SHIFT
            | _channel(green, "green") << _GREEN_SHIFT
            | _channel(blue, "blue") << _BLUE_SHIFT
        )

    @classmethod
    def black(cls) -> "ColorRgba":
        return cls.from_rgba(0, 0, 0, 255)

    @classmethod
    def white(cls) -> "ColorRgba":
        return cls.from_rgba(255, 255, 255, 255)

    @classmethod
    def red_color(cls) -> "ColorRgba":
        return cls.from_rgba(255, 0, 0, 255)

    @classmethod
    def green_color(cls) -> "ColorRgba":
        return cls.from_rgba(0, 255, 0, 255)

    @classmethod
    def blue_color(cls) -> "ColorRgba":
        return cls.from_rgba(0, 0, 255, 255)

    @property
    def alpha(self) -> int:
        return (self.color >> _ALPHA_SHIFT) & 0xFF

    @property
    def red(self) -> int:
        return (self.color >> _RED_SHIFT) & 0xFF

    @property
    def green(self) -> int:
        return (self.color >> _GREEN_SHIFT) & 0xFF

    @property
    def blue(self) -> int:
        return (self.color >> _BLUE_SHIFT) & 0xFF

    def with_alpha(self, alpha: int) -> "ColorRgba":
        """Return this colour with its alpha channel replaced."""
        mask = ~(0xFF << _ALPHA_SHIFT) & 0xFFFFFFFF
        return ColorRgba((self.color & mask) | (_channel(alpha, "alpha") << _ALPHA_SHIFT))


class BitmapType(enum.IntEnum):
    NONE = 0
    RAW_BITMAP = 1
    DIB_BITMAP = 2
    SPLICED = 3


class Bmp8Flags(enum.IntFlag):
    RAW_BMP_UNALIGNED = 1 << 0
    DIB_BITMAP = 1 << 1
    SPLICED = 1 << 2


@dataclass
class Bmp8Header:
    """Header of an 8-bit bitmap record in a table data file."""

    resolution: int
    width: int
    height: int
    x_position: int
    y_position: int
    size: int
    flags: Bmp8Flags

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<BhhhhiB")

    @classmethod
    def unpack(cls, data: bytes) -> "Bmp8Header":
        if len(data) != cls.FORMAT.size:
            raise ValueError(f"bitmap header must be {cls.FORMAT.size} bytes, got {len(data)}")
        resolution, width, height, x, y, size, flags = cls.FORMAT.unpack(data)
        return cls(resolution, width, height, x, y, size, Bmp8Flags(flags))

    def is_flag_set(self, flag: Bmp8Flags) -> bool:
        return bool(self.flags & flag)


_TRANSPARENT = ColorRgba(0)


class Bitmap8:
    """A bitmap holding palette indices and the true-colour pixels made from them."""

    def __init__(self, width: int, height: int, indexed: bool) -> None:
        if width < 0 or height < 0:
            raise ValueError("negative bitmap dimensions")
        self.width = width
        self.height = height
        self.stride = width
        self.indexed_stride = width
        self.bitmap_type = BitmapType.DIB_BITMAP
        self.x_position = 0
        self.y_position = 0
        self.resolution = 0
        self.indexed: Optional[bytearray] = bytearray(height * width) if indexed else None
        self.pixels: list[ColorRgba] = [_TRANSPARENT] * (self.stride * height)

    @classmethod
    def from_header(cls, header: Bmp8Header) -> "Bitmap8":
        if header.width < 0 or header.height < 0:
            raise ValueError("negative bitmap dimensions")
        if header.is_flag_set(Bmp8Flags.SPLICED):
            bitmap_type = BitmapType.SPLICED
        elif header.is_flag_set(Bmp8Flags.DIB_BITMAP):
            bitmap_type = BitmapType.DIB_BITMAP
        else:
            bitmap_type = BitmapType.RAW_BITMAP

        bmp = cls(header.width, header.height, indexed=False)
        bmp.bitmap_type = bitmap_type
        bmp.x_position = header.x_position
        bmp.y_position = header.y_position
        bmp.resolution = header.resolution

        if bitmap_type == BitmapType.SPLICED:
            size = header.size
        else:
            if bitmap_type == BitmapType.RAW_BITMAP and bmp.width % 4 and not header.is_flag_set(
                Bmp8Flags.RAW_BMP_UNALIGNED
            ):
                raise ValueError("wrong raw bitmap align flag")
            if bmp.width % 4:
                bmp.indexed_stride = bmp.width - bmp.width % 4 + 4
            size = bmp.height * bmp.indexed_stride
            if size != header.size:
                raise ValueError(f"wrong bitmap size: expected {size}, header says {header.size}")
        bmp.indexed = bytearray(size)
        return bmp

    def scale_indexed(self, scale_x: float, scale_y: float) -> None:
        """Resample the indexed data by nearest neighbour."""
        if self.indexed is None:
            raise ValueError("scaling a non-indexed bitmap")
        new_width = int(self.width * scale_x)
        new_height = int(self.height * scale_y)
        if new_width == self.width and new_height == self.height:
            return
        source = self.indexed
        stride = self.indexed_stride
        self.indexed = bytearray(
            source[int(y / scale_y) * stride + int(x / scale_x)]
            for y in range(new_height)
            for x in range(new_width)
        )
        self.width = self.stride = self.indexed_stride = new_width
        self.height = new_height
        self.pixels = [_TRANSPARENT] * (self.stride * self.height)


_SYSTEM_PALETTE = (
    ColorRgba.from_rgba(0, 0, 0, 0),
    ColorRgba.from_rgba(0x80, 0, 0, 0xFF),
    ColorRgba.from_rgba(0, 0x80, 0, 0xFF),
    ColorRgba.from_rgba(0x80, 0x80, 0, 0xFF),
    ColorRgba.from_rgba(0, 0, 0x80, 0xFF),
    ColorRgba.from_rgba(0x80, 0, 0x80, 0xFF),
    ColorRgba.from_rgba(0, 0x80, 0x80, 0xFF),
    ColorRgba.from_rgba(0xC0, 0xC0, 0xC0, 0xFF),
    ColorRgba.from_rgba(0xC0, 0xDC, 0xC0, 0xFF),
    ColorRgba.from_rgba(0xA6, 0xCA, 0xF0, 0xFF),
)


def make_display_palette(plt: Optional[Sequence[ColorRgba]]) -> list[ColorRgba]:
    """Build the 256-entry display palette from a table palette.

    Entries 0-9 are fixed system colours, 10-245 come from ``plt`` (with
    alpha set to 2), 255 is white and the rest are zero.
    """
    palette = list(_SYSTEM_PALETTE) + [_TRANSPARENT] * (PALETTE_SIZE - len(_SYSTEM_PALETTE))
    if plt is not None:
        for index in range(10, 246):
            palette[index] = plt[index].with_alpha(2)
    palette[255] = ColorRgba.white()
    return palette


def fill_bitmap(bmp: Bitmap8, width: int, height: int, x_off: int, y_off: int, color: ColorRgba) -> None:
    for y in range(y_off, y_off + height):
        start = y * bmp.stride + x_off
        bmp.pixels[start:start + width] = [color] * width


def copy_bitmap(
    dst: Bitmap8, width: int, height: int, x_off: int, y_off: int,
    src: Bitmap8, src_x_off: int, src_y_off: int,
) -> None:
    for row in range(height):
        s = (src_y_off + row) * src.stride + src_x_off
        d = (y_off + row) * dst.stride + x_off
        dst.pixels[d:d + width] = src.pixels[s:s + width]


def copy_bitmap_w_transparency(
    dst: Bitmap8, width: int, height: int, x_off: int, y_off: int,
    src: Bitmap8, src_x_off: int, src_y_off: int,
) -> None:
    """Copy a region, skipping source pixels whose packed value is zero."""
    for row in range(height):
        s = (src_y_off + row) * src.stride + src_x_off
        d = (y_off + row) * dst.stride + x_off
        for offset, pixel in enumerate(src.pixels[s:s + width]):
            if pixel.color:
                dst.pixels[d + offset] = pixel


def scroll_bitmap_horizontal(bmp: Bitmap8, x_start: int) -> None:
    """Shift every row by ``x_start`` pixels; uncovered pixels keep their value."""
    start_offset = 0 if x_start >= 0 else -x_start
    end_offset = x_start if x_start >= 0 else 0
    length = bmp.width - abs(x_start)
    if length <= 0:
        return
    for y in range(bmp.height):
        row = y * bmp.stride
        bmp.pixels[row + end_offset:row + end_offset + length] = bmp.pixels[
            row + start_offset:row + start_offset + length
        ]


def apply_palette(bmp: Bitmap8, palette: Sequence[ColorRgba]) -> None:
    """Convert indexed data to colours, turning the rows upside down."""
    if bmp.bitmap_type == BitmapType.NONE:
        return
    if bmp.bitmap_type == BitmapType.SPLICED:
        raise ValueError("cannot apply a palette to a spliced bitmap")
    if bmp.indexed is None:
        raise ValueError("cannot apply a palette to a non-indexed bitmap")
    pixels = []
    for y in range(bmp.height - 1, -1, -1):
        start = y * bmp.indexed_stride
        pixels.extend(palette[index] for index in bmp.indexed[start:start + bmp.width])
    bmp.pixels[:len(pixels)] = pixels