"""Persistent game settings, control bindings and control rebinding."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, fields
from typing import Iterable, Optional

MAX_UPS = 360
MAX_FPS = MAX_UPS
MIN_UPS = 60
MIN_FPS = MIN_UPS
DEF_UPS = 120
DEF_FPS = 60

MAX_SOUND_CHANNELS = 32
MIN_SOUND_CHANNELS = 1
DEF_SOUND_CHANNELS = 8

SETTINGS_ENTRY = "Settings"
DEFAULT_TYPE_NAME = "Pinball"

_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

# Key, mouse button and controller button codes used by the default bindings.
_KEY_Z = ord("z")
_KEY_X = ord("x")
_KEY_SLASH = ord("/")
_KEY_PERIOD = ord(".")
_KEY_SPACE = ord(" ")
_KEY_UP = 0x40000052
_KEY_F1 = 0x4000003A
_KEY_F12 = 0x40000045

_MOUSE_LEFT = 1
_MOUSE_MIDDLE = 2
_MOUSE_RIGHT = 3
_MOUSE_X1 = 4
_MOUSE_X2 = 5

_PAD_A = 0
_PAD_START = 6
_PAD_LEFT_SHOULDER = 9
_PAD_RIGHT_SHOULDER = 10
_PAD_DPAD_UP = 11
_PAD_DPAD_LEFT = 13
_PAD_DPAD_RIGHT = 14


class Menu1(enum.IntEnum):
    NEW_GAME = 101
    ABOUT_PINBALL = 102
    HIGH_SCORES = 103
    EXIT = 105
    SOUNDS = 201
    MUSIC = 202
    HELP_TOPICS = 301
    LAUNCH_BALL = 401
    PAUSE_RESUME_GAME = 402
    FULL_SCREEN = 403
    DEMO = 404
    SELECT_TABLE = 405
    PLAYER_CONTROLS = 406
    ONE_PLAYER = 408
    TWO_PLAYERS = 409
    THREE_PLAYERS = 410
    FOUR_PLAYERS = 411
    SHOW_MENU = 412
    MAXIMUM_RESOLUTION = 500
    R640X480 = 501
    R800X600 = 502
    R1024X768 = 503
    WINDOW_UNIFORM_SCALE = 600
    WINDOW_LINEAR_FILTER = 601
    WINDOW_INTEGER_SCALE = 602
    PREFER_3DPB_GAME_DATA = 700


class InputType(enum.IntEnum):
    NONE = 0
    KEYBOARD = 1
    MOUSE = 2
    GAME_CONTROLLER = 3


@dataclass(frozen=True)
class GameInput:
    """One binding: an input device kind and the key or button code."""

    type: InputType = InputType.NONE
    value: int = 0


def _unused_row() -> list[GameInput]:
    return [GameInput() for _ in range(3)]


@dataclass
class Controls:
    """Three bindings for each game control."""

    left_flipper: list[GameInput] = field(default_factory=_unused_row)
    right_flipper: list[GameInput] = field(default_factory=_unused_row)
    plunger: list[GameInput] = field(default_factory=_unused_row)
    left_table_bump: list[GameInput] = field(default_factory=_unused_row)
    right_table_bump: list[GameInput] = field(default_factory=_unused_row)
    bottom_table_bump: list[GameInput] = field(default_factory=_unused_row)

    def row(self, name: str) -> list[GameInput]:
        """Return the binding list of control ``name``."""
        if name not in {f.name for f in fields(self)}:
            raise KeyError(f"unknown control: {name}")
        return getattr(self, name)

    def copy(self) -> "Controls":
        return Controls(**{f.name: list(getattr(self, f.name)) for f in fields(self)})


CONTROL_ROWS: tuple[tuple[str, str], ...] = (
    ("Left Flipper", "left_flipper"),
    ("Right Flipper", "right_flipper"),
    ("Left Table Bump", "left_table_bump"),
    ("Right Table Bump", "right_table_bump"),
    ("Bottom Table Bump", "bottom_table_bump"),
    ("Plunger", "plunger"),
)
"""Display names of the controls in dialog order, with their attribute names."""

_SETTING_ROWS: tuple[tuple[str, str], ...] = (
    ("Left Flipper key", "left_flipper"),
    ("Right Flipper key", "right_flipper"),
    ("Plunger key", "plunger"),
    ("Left Table Bump key", "left_table_bump"),
    ("Right Table Bump key", "right_table_bump"),
    ("Bottom Table Bump key", "bottom_table_bump"),
)


def default_controls() -> Controls:
    """The factory control bindings."""
    kb, mouse, pad = InputType.KEYBOARD, InputType.MOUSE, InputType.GAME_CONTROLLER
    return Controls(
        left_flipper=[GameInput(kb, _KEY_Z), GameInput(mouse, _MOUSE_LEFT),
                      GameInput(pad, _PAD_LEFT_SHOULDER)],
        right_flipper=[GameInput(kb, _KEY_SLASH), GameInput(mouse, _MOUSE_RIGHT),
                       GameInput(pad, _PAD_RIGHT_SHOULDER)],
        plunger=[GameInput(kb, _KEY_SPACE), GameInput(mouse, _MOUSE_MIDDLE),
                 GameInput(pad, _PAD_A)],
        left_table_bump=[GameInput(kb, _KEY_X), GameInput(mouse, _MOUSE_X1),
                         GameInput(pad, _PAD_DPAD_LEFT)],
        right_table_bump=[GameInput(kb, _KEY_PERIOD), GameInput(mouse, _MOUSE_X2),
                          GameInput(pad, _PAD_DPAD_RIGHT)],
        bottom_table_bump=[GameInput(kb, _KEY_UP), GameInput(mouse, _MOUSE_X2 + 1),
                           GameInput(pad, _PAD_DPAD_UP)],
    )


@dataclass
class GameOptions:
    key: Controls = field(default_factory=default_controls)
    key_dft: Controls = field(default_factory=default_controls)
    sounds: bool = True
    music: bool = False
    full_screen: bool = False
    players: int = 1
    resolution: int = -1
    uniform_scaling: bool = True
    linear_filtering: bool = True
    frames_per_second: int = DEF_FPS
    updates_per_second: int = DEF_UPS
    show_menu: bool = True
    uncapped_updates_per_second: bool = False
    sound_channels: int = DEF_SOUND_CHANNELS
    hybrid_sleep: bool = False
    prefer_3dpb_game_data: bool = False
    integer_scaling: bool = False
    ui_scale: float = 1.0


def _parse_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if not match:
        raise ValueError(f"not an integer setting: {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer setting out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    match = _LEADING_FLOAT.match(text)
    if not match:
        raise ValueError(f"not a number setting: {text!r}")
    return float(match.group(1))


class Settings:
    """A string key/value store; reading a missing key stores its default."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.dirty = False

    def _get(self, key: str, default: str) -> str:
        if key not in self.values:
            self.values[key] = default
            self.dirty = True
            return default
        return self.values[key]

    def _set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.dirty = True

    def get_int(self, name: str, default: int) -> int:
        return _parse_int(self._get(name, str(int(default))))

    def set_int(self, name: str, value: int) -> None:
        self._set(name, str(int(value)))

    def get_string(self, name: str, default: str) -> str:
        return self._get(name, default)

    def set_string(self, name: str, value: str) -> None:
        self._set(name, value)

    def get_float(self, name: str, default: float) -> float:
        return _parse_float(self._get(name, f"{default:f}"))

    def set_float(self, name: str, value: float) -> None:
        self._set(name, f"{value:f}")

    def read_lines(self, lines: Iterable[str]) -> None:
        """Load ``key=value`` lines; lines without ``=`` are ignored."""
        for line in lines:
            key, sep, value = line.rstrip("\r\n").partition("=")
            if sep:
                self.values[key] = value

    def dump(self, type_name: str = DEFAULT_TYPE_NAME) -> str:
        """Serialise as an ini section, keys in sorted order."""
        body = "".join(f"{key}={self.values[key]}\n" for key in sorted(self.values))
        return f"[{type_name}][{SETTINGS_ENTRY}]\n{body}\n"

    def get_input(self, row_name: str, defaults: Iterable[GameInput]) -> list[GameInput]:
        """Return the stored bindings of a control, falling back to ``defaults``."""
        result = list(defaults)
        for i in range(3):
            name = f"{row_name} {i}"
            input_type = self.get_int(f"{name} type", -1)
            value = self.get_int(f"{name} input", -1)
            if 0 <= input_type <= InputType.GAME_CONTROLLER and value != -1:
                result[i] = GameInput(InputType(input_type), value)
        return result

    def set_input(self, row_name: str, values: Iterable[GameInput]) -> None:
        for i, game_input in enumerate(list(values)[:3]):
            name = f"{row_name} {i}"
            self.set_int(f"{name} type", int(game_input.type))
            self.set_int(f"{name} input", game_input.value)


def _clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


def load_options(settings: Settings) -> GameOptions:
    """Read the game options from ``settings``, applying defaults and limits."""
    options = GameOptions()
    for row_name, attr in _SETTING_ROWS:
        setattr(options.key, attr, settings.get_input(row_name, options.key.row(attr)))

    options.sounds = settings.get_int("Sounds", True) != 0
    options.music = settings.get_int("Music", False) != 0
    options.full_screen = settings.get_int("FullScreen", False) != 0
    options.players = settings.get_int("Players", 1)
    options.uniform_scaling = settings.get_int("Uniform scaling", True) != 0
    options.ui_scale = settings.get_float("UI Scale", 1.0)
    options.resolution = settings.get_int("Screen Resolution", -1)
    options.linear_filtering = settings.get_int("Linear Filtering", True) != 0
    options.frames_per_second = _clamp(
        settings.get_int("Frames Per Second", DEF_FPS), MIN_UPS, MAX_FPS)
    ups = _clamp(settings.get_int("Updates Per Second", DEF_UPS), MIN_UPS, MAX_UPS)
    options.updates_per_second = max(ups, options.frames_per_second)
    options.show_menu = settings.get_int("ShowMenu", True) != 0
    options.uncapped_updates_per_second = settings.get_int("Uncapped Updates Per Second", False) != 0
    options.sound_channels = _clamp(
        settings.get_int("Sound Channels", DEF_SOUND_CHANNELS),
        MIN_SOUND_CHANNELS, MAX_SOUND_CHANNELS)
    options.hybrid_sleep = settings.get_int("HybridSleep", False) != 0
    options.prefer_3dpb_game_data = settings.get_int("Prefer 3DPB Game Data", False) != 0
    options.integer_scaling = settings.get_int("Integer Scaling", False) != 0
    return options


def save_options(settings: Settings, options: GameOptions) -> None:
    """Store the game options in ``settings``."""
    for row_name, attr in _SETTING_ROWS:
        settings.set_input(row_name, options.key.row(attr))

    settings.set_int("Sounds", options.sounds)
    settings.set_int("Music", options.music)
    settings.set_int("FullScreen", options.full_screen)
    settings.set_int("Players", options.players)
    settings.set_int("Screen Resolution", options.resolution)
    settings.set_int("Uniform scaling", options.uniform_scaling)
    settings.set_float("UI Scale", options.ui_scale)
    settings.set_int("Linear Filtering", options.linear_filtering)
    settings.set_int("Frames Per Second", options.frames_per_second)
    settings.set_int("Updates Per Second", options.updates_per_second)
    settings.set_int("ShowMenu", options.show_menu)
    settings.set_int("Uncapped Updates Per Second", options.uncapped_updates_per_second)
    settings.set_int("Sound Channels", options.sound_channels)
    settings.set_int("HybridSleep", options.hybrid_sleep)
    settings.set_int("Prefer 3DPB Game Data", options.prefer_3dpb_game_data)
    settings.set_int("Integer Scaling", options.integer_scaling)


class ControlRebinder:
    """Edits a working copy of the controls, one binding slot at a time."""

    def __init__(self, controls: Controls) -> None:
        self.controls = controls.copy()
        self.waiting: Optional[tuple[str, int]] = None

    @property
    def waiting_for_input(self) -> bool:
        return self.waiting is not None

    def wait_for(self, row: str, slot: int) -> None:
        """Make the next accepted input replace binding ``slot`` of ``row``."""
        self.controls.row(row)
        if not 0 <= slot < 3:
            raise IndexError(f"binding slot out of range: {slot}")
        self.waiting = (row, slot)

    def clear_row(self, row: str) -> None:
        """Unbind every slot of ``row``."""
        self.controls.row(row)[:] = _unused_row()

    def input_down(self, game_input: GameInput) -> bool:
        """Offer an input; return True if it was bound."""
        if self.waiting is None:
            return False
        if game_input.type == InputType.KEYBOARD and _KEY_F1 <= game_input.value <= _KEY_F12:
            return False
        if game_input.type == InputType.GAME_CONTROLLER and game_input.value == _PAD_START:
            return False
        row, slot = self.waiting
        self.controls.row(row)[slot] = game_input
        self.waiting = None
        return True

    def reset_to_defaults(self) -> None:
        self.controls = default_controls()
        self.waiting = None