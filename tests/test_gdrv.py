import pytest

from cadetpinball.gdrv import (
    Bitmap8,
    BitmapType,
    Bmp8Flags,
    Bmp8Header,
    ColorRgba,
    apply_palette,
    copy_bitmap,
    copy_bitmap_w_transparency,
    fill_bitmap,
    make_display_palette,
    scroll_bitmap_horizontal,
)

RED = ColorRgba.from_rgba(10, 20, 30, 255)
BLUE = ColorRgba.from_rgba(40, 50, 60, 255)


def row(bmp, y):
    return bmp.pixels[y * bmp.stride:(y + 1) * bmp.stride]


def test_color_channels_round_trip():
    c = ColorRgba.from_rgba(1, 2, 3, 4)
    assert (c.red, c.green, c.blue, c.alpha) == (1, 2, 3, 4)


def test_white_channels():
    w = ColorRgba.white()
    assert (w.red, w.green, w.blue, w.alpha) == (255, 255, 255, 255)


def test_with_alpha_keeps_rgb():
    c = RED.with_alpha(7)
    assert (c.red, c.green, c.blue, c.alpha) == (10, 20, 30, 7)


def test_channel_out_of_range():
    with pytest.raises(ValueError):
        ColorRgba.from_rgba(256, 0, 0, 0)


def test_header_unpack_round_trip():
    data = Bmp8Header.FORMAT.pack(1, 5, 2, 7, 9, 16, 1)
    header = Bmp8Header.unpack(data)
    assert (header.resolution, header.width, header.height) == (1, 5, 2)
    assert (header.x_position, header.y_position, header.size) == (7, 9, 16)
    assert header.is_flag_set(Bmp8Flags.RAW_BMP_UNALIGNED)
    assert not header.is_flag_set(Bmp8Flags.SPLICED)


def test_header_unpacks_fourteen_zero_bytes():
    header = Bmp8Header.unpack(bytes(14))
    assert (header.resolution, header.width, header.height) == (0, 0, 0)
    assert (header.x_position, header.y_position, header.size) == (0, 0, 0)
    assert not header.is_flag_set(Bmp8Flags.DIB_BITMAP)


def test_header_unpack_wrong_length():
    with pytest.raises(ValueError):
        Bmp8Header.unpack(b"\x00" * 13)


def test_negative_dimensions():
    with pytest.raises(ValueError):
        Bitmap8(-1, 2, True)


def test_new_bitmap_buffers():
    bmp = Bitmap8(3, 4, True)
    assert len(bmp.indexed) == 3 * 4
    assert len(bmp.pixels) == 3 * 4
    assert Bitmap8(3, 4, False).indexed is None


def test_from_header_unaligned_raw():
    header = Bmp8Header(0, 5, 2, 0, 0, 16, Bmp8Flags.RAW_BMP_UNALIGNED)
    bmp = Bitmap8.from_header(header)
    assert bmp.bitmap_type == BitmapType.RAW_BITMAP
    assert bmp.indexed_stride * bmp.height == header.size
    assert bmp.indexed_stride % 4 == 0
    assert len(bmp.indexed) == header.size
    assert bmp.stride == 5


def test_from_header_missing_align_flag():
    with pytest.raises(ValueError):
        Bitmap8.from_header(Bmp8Header(0, 5, 2, 0, 0, 16, Bmp8Flags(0)))


def test_from_header_wrong_size():
    with pytest.raises(ValueError):
        Bitmap8.from_header(Bmp8Header(0, 4, 2, 0, 0, 9, Bmp8Flags.DIB_BITMAP))


def test_from_header_spliced_uses_header_size():
    bmp = Bitmap8.from_header(Bmp8Header(2, 4, 4, 3, 6, 37, Bmp8Flags.SPLICED))
    assert bmp.bitmap_type == BitmapType.SPLICED
    assert len(bmp.indexed) == 37
    assert (bmp.x_position, bmp.y_position, bmp.resolution) == (3, 6, 2)


def test_scale_indexed_doubles():
    bmp = Bitmap8(2, 2, True)
    bmp.indexed[:] = bytes([1, 2, 3, 4])
    bmp.scale_indexed(2.0, 2.0)
    assert (bmp.width, bmp.height) == (4, 4)
    assert bmp.indexed[0:2] == bytes([1, 1])
    assert bmp.indexed[2:4] == bytes([2, 2])
    assert bmp.indexed[12:16] == bytes([3, 3, 4, 4])
    assert len(bmp.pixels) == 16


def test_scale_non_indexed_raises():
    with pytest.raises(ValueError):
        Bitmap8(2, 2, False).scale_indexed(2.0, 2.0)


def test_palette_without_table():
    palette = make_display_palette(None)
    assert len(palette) == 256
    assert palette[0].color == 0
    assert palette[1] == ColorRgba.from_rgba(0x80, 0, 0, 0xFF)
    assert palette[255] == ColorRgba.white()
    assert all(c.color == 0 for c in palette[10:255])


def test_palette_from_table():
    table = [ColorRgba.from_rgba(i % 256, 1, 2, 0) for i in range(256)]
    palette = make_display_palette(table)
    assert palette[10].alpha == 2
    assert palette[10].red == table[10].red
    assert palette[245].red == table[245].red
    assert palette[246].color == 0
    assert palette[255] == ColorRgba.white()


def test_fill_bitmap_region():
    bmp = Bitmap8(4, 3, False)
    fill_bitmap(bmp, 2, 2, 1, 1, RED)
    assert row(bmp, 0) == [ColorRgba(0)] * 4
    assert row(bmp, 1) == [ColorRgba(0), RED, RED, ColorRgba(0)]
    assert row(bmp, 2) == [ColorRgba(0), RED, RED, ColorRgba(0)]


def test_copy_bitmap():
    src = Bitmap8(3, 3, False)
    fill_bitmap(src, 3, 3, 0, 0, BLUE)
    dst = Bitmap8(4, 4, False)
    copy_bitmap(dst, 2, 2, 2, 2, src, 0, 0)
    assert row(dst, 3) == [ColorRgba(0), ColorRgba(0), BLUE, BLUE]
    assert row(dst, 1) == [ColorRgba(0)] * 4


def test_copy_with_transparency_skips_zero():
    src = Bitmap8(2, 1, False)
    src.pixels[1] = BLUE
    dst = Bitmap8(2, 1, False)
    fill_bitmap(dst, 2, 1, 0, 0, RED)
    copy_bitmap_w_transparency(dst, 2, 1, 0, 0, src, 0, 0)
    assert dst.pixels == [RED, BLUE]


def test_scroll_right_and_left():
    bmp = Bitmap8(4, 1, False)
    colors = [ColorRgba.from_rgba(i, 0, 0, 255) for i in range(4)]
    bmp.pixels[:] = colors
    scroll_bitmap_horizontal(bmp, 1)
    assert bmp.pixels == [colors[0], colors[0], colors[1], colors[2]]
    bmp.pixels[:] = colors
    scroll_bitmap_horizontal(bmp, -1)
    assert bmp.pixels == [colors[1], colors[2], colors[3], colors[3]]


def test_apply_palette_flips_rows():
    bmp = Bitmap8(2, 2, True)
    bmp.indexed[:] = bytes([1, 2, 3, 4])
    palette = [ColorRgba.from_rgba(i, 0, 0, 255) for i in range(256)]
    apply_palette(bmp, palette)
    assert bmp.pixels == [palette[3], palette[4], palette[1], palette[2]]


def test_apply_palette_spliced_raises():
    bmp = Bitmap8.from_header(Bmp8Header(0, 4, 4, 0, 0, 10, Bmp8Flags.SPLICED))
    with pytest.raises(ValueError):
        apply_palette(bmp, make_display_palette(None))