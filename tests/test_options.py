import pytest

from cadetpinball.options import (
    CONTROL_ROWS,
    ControlRebinder,
    Controls,
    GameInput,
    GameOptions,
    InputType,
    MAX_FPS,
    MIN_UPS,
    Settings,
    default_controls,
    load_options,
    save_options,
)


def test_default_left_flipper_is_z_key():
    controls = default_controls()
    assert controls.left_flipper[0] == GameInput(InputType.KEYBOARD, ord("z"))
    assert controls.plunger[0] == GameInput(InputType.KEYBOARD, ord(" "))


def test_get_int_stores_default():
    settings = Settings()
    assert settings.get_int("Players", 1) == 1
    assert settings.values["Players"] == "1"
    assert settings.dirty


def test_set_and_get_int():
    settings = Settings()
    settings.set_int("Players", 3)
    assert settings.get_int("Players", 1) == 3


def test_float_round_trip_uses_fixed_format():
    settings = Settings()
    settings.set_float("UI Scale", 1.5)
    assert settings.get_float("UI Scale", 1.0) == 1.5
    assert settings.get_string("UI Scale", "") == "1.500000"


def test_get_int_invalid_raises():
    settings = Settings()
    settings.set_string("Players", "abc")
    with pytest.raises(ValueError):
        settings.get_int("Players", 1)


def test_read_lines_splits_on_first_equals():
    settings = Settings()
    settings.read_lines(["a=b", "noequals", "c=d=e"])
    assert settings.values == {"a": "b", "c": "d=e"}


def test_dump_format():
    settings = Settings()
    settings.set_string("b", "2")
    settings.set_string("a", "1")
    assert settings.dump("Pinball") == "[Pinball][Settings]\na=1\nb=2\n\n"


def test_dump_read_round_trip():
    settings = Settings()
    settings.set_int("x", 5)
    settings.set_string("name", "hello world")
    other = Settings()
    other.read_lines(settings.dump().splitlines())
    assert other.values == settings.values


def test_get_input_overrides_and_ignores():
    settings = Settings()
    settings.set_int("Row 0 type", int(InputType.MOUSE))
    settings.set_int("Row 0 input", 7)
    settings.set_int("Row 1 type", -1)
    settings.set_int("Row 1 input", 9)
    settings.set_int("Row 2 type", int(InputType.KEYBOARD))
    settings.set_int("Row 2 input", -1)
    defaults = [GameInput(InputType.KEYBOARD, 1)] * 3
    result = settings.get_input("Row", defaults)
    assert result[0] == GameInput(InputType.MOUSE, 7)
    assert result[1] == defaults[1]
    assert result[2] == defaults[2]


def test_set_input_get_input_round_trip():
    settings = Settings()
    values = [
        GameInput(InputType.KEYBOARD, 120),
        GameInput(InputType.NONE, 0),
        GameInput(InputType.GAME_CONTROLLER, 3),
    ]
    settings.set_input("Plunger key", values)
    assert settings.get_input("Plunger key", default_controls().plunger) == values


def test_load_options_defaults():
    options = load_options(Settings())
    assert options == GameOptions()
    assert options.sounds is True
    assert options.music is False
    assert options.resolution == -1


def test_load_options_clamps_rates():
    settings = Settings()
    settings.set_int("Frames Per Second", 100000)
    settings.set_int("Updates Per Second", 1)
    settings.set_int("Sound Channels", 0)
    options = load_options(settings)
    assert options.frames_per_second == MAX_FPS
    assert options.updates_per_second >= options.frames_per_second
    assert options.sound_channels == 1
    settings.set_int("Frames Per Second", 1)
    assert load_options(settings).frames_per_second == MIN_UPS


def test_save_load_round_trip():
    options = GameOptions()
    options.music = True
    options.players = 4
    options.ui_scale = 2.0
    options.key.plunger[1] = GameInput(InputType.MOUSE, 7)
    settings = Settings()
    save_options(settings, options)
    assert load_options(settings) == options


def test_rebinder_binds_waiting_slot():
    rebinder = ControlRebinder(default_controls())
    rebinder.wait_for("plunger", 2)
    new_input = GameInput(InputType.KEYBOARD, ord("q"))
    assert rebinder.input_down(new_input) is True
    assert rebinder.controls.plunger[2] == new_input
    assert not rebinder.waiting_for_input


def test_rebinder_does_not_touch_original():
    original = default_controls()
    rebinder = ControlRebinder(original)
    rebinder.wait_for("left_flipper", 0)
    rebinder.input_down(GameInput(InputType.KEYBOARD, ord("q")))
    assert original == default_controls()


def test_rebinder_skips_reserved_inputs():
    rebinder = ControlRebinder(default_controls())
    rebinder.wait_for("plunger", 0)
    assert rebinder.input_down(GameInput(InputType.KEYBOARD, 0x4000003A)) is False
    assert rebinder.input_down(GameInput(InputType.GAME_CONTROLLER, 6)) is False
    assert rebinder.waiting_for_input
    assert rebinder.controls.plunger == default_controls().plunger


def test_rebinder_ignores_input_when_not_waiting():
    rebinder = ControlRebinder(default_controls())
    assert rebinder.input_down(GameInput(InputType.KEYBOARD, 1)) is False


def test_rebinder_reset_and_clear():
    rebinder = ControlRebinder(Controls())
    rebinder.wait_for("plunger", 0)
    rebinder.reset_to_defaults()
    assert rebinder.controls == default_controls()
    assert not rebinder.waiting_for_input
    rebinder.clear_row("plunger")
    assert rebinder.controls.plunger == [GameInput()] * 3


def test_rebinder_rejects_bad_row_and_slot():
    rebinder = ControlRebinder(default_controls())
    with pytest.raises(KeyError):
        rebinder.wait_for("nonsense", 0)
    with pytest.raises(IndexError):
        rebinder.wait_for("plunger", 3)


def test_control_rows_cover_all_controls():
    controls = default_controls()
    assert all(controls.row(attr) for _, attr in CONTROL_ROWS)
    assert len({attr for _, attr in CONTROL_ROWS}) == 6