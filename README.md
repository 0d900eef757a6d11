# cadetpinball

The engine-independent core of a 3D space-themed pinball table, in pure
Python with no dependencies beyond the standard library.

## What is inside

- `cadetpinball.maths` – vectors and rectangles (`Vector`, `Rectangle`,
  `enclosing_box`, `rectangle_clip`, `overlapping_box`), ray intersection
  with lines and circles (`Ray`, `Line`, `Circle`, `line_init`,
  `ray_intersect_line`, `ray_intersect_circle`), ball bounce response
  (`MovingBody`, `basic_collision`), flipper hit queries
  (`distance_to_flipper`) and ramp edge lookup (`RampPlane`, `WallPoint`,
  `find_closest_edge`). A ray that hits nothing reports
  `NO_INTERSECTION` (1e9).
- `cadetpinball.proj` – `Projection`, a camera built from a 4x3 matrix, a
  focal distance and a screen centre; `xform_to_2d` projects a point to
  integer screen coordinates and `z_distance` gives its distance from the
  camera.
- `cadetpinball.gdrv` – packed ARGB colours (`ColorRgba`), 8-bit bitmap
  headers (`Bmp8Header.unpack` reads the 14-byte little-endian record),
  indexed bitmaps (`Bitmap8`, `Bitmap8.from_header`, `scale_indexed`),
  display palettes (`make_display_palette`, `apply_palette`) and blitting
  (`fill_bitmap`, `copy_bitmap`, `copy_bitmap_w_transparency`,
  `scroll_bitmap_horizontal`).
- `cadetpinball.midi` – converts RIFF MIDS music into a format 0 standard
  MIDI file (`mds_to_midi`, `mds_file_to_midi`), raising `MdsFormatError`
  on malformed input. Also `to_variable_len` for MIDI variable-length
  quantities.
- `cadetpinball.options` – a string key/value `Settings` store (reading a
  missing key stores its default) with an ini-style text form
  (`read_lines`, `dump`); control bindings (`InputType`, `GameInput`,
  `Controls`, `default_controls`), interactive rebinding
  (`ControlRebinder`) and game options with their limits (`GameOptions`,
  `load_options`, `save_options`).
- `cadetpinball.high_score` – the five-entry `HighScoreTable`, stored in
  `Settings` together with a checksum; a table whose checksum does not
  match is read back cleared.

## Installing

```
pip install .
```

## Examples

Projecting a point through a camera:

```python
from cadetpinball.maths import Vector
from cadetpinball.proj import Projection

identity = [1, 0, 0, 0,
            0, 1, 0, 0,
            0, 0, 1, 0]
camera = Projection(identity, d=100.0, center_x=320.0, center_y=240.0)
print(camera.xform_to_2d(Vector(1.0, 2.0, 10.0)))  # (330, 260)
```

Converting MIDS music to MIDI:

```python
from cadetpinball.midi import mds_file_to_midi

midi_bytes = mds_file_to_midi("SOUND/TABA1.MDS")
with open("taba1.mid", "wb") as out:
    out.write(midi_bytes)
```

Keeping high scores:

```python
from cadetpinball.options import Settings
from cadetpinball.high_score import HighScoreTable

settings = Settings()
table = HighScoreTable()
position = table.get_score_position(125000)
table.place_new_score_into(125000, "Player 1", position)
table.write(settings)
print(settings.dump("Pinball"))
```

## What it does not do

This package is a library of building blocks. It has no command to run,
no window, renderer or sound output, and no game loop. It does not read
whole table data files, does not hold the table's message strings, and
does not save settings to disk by itself: `Settings.dump` returns the text
and `Settings.read_lines` takes it back, and storing that text is left to
the caller.

## Running the tests

```
pip install .[test]
pytest
```