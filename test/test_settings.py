import json
import math

import pytest

from pulsecore.primitives import Canvas, ExportFormat
from pulsecore.settings import (BRIGHTNESS_RANGE, BUILTIN_SCHEMES, DEFAULT_SCHEME, ELECTRIC_SCHEME,
                                SPEED_RANGE, ColorScheme, PatternConfig, PatternSettings,
                                SettingsLoader, clamp)
from pulsescenes.imgutils import hex_to_rgba, rgba_to_hex
from pulsescenes.modes import PatternMode


def test_hex_forms():
    assert hex_to_rgba("#fff") == (1.0, 1.0, 1.0, 1.0)
    assert hex_to_rgba("#ff0000") == (1.0, 0.0, 0.0, 1.0)
    assert hex_to_rgba("80000000") == (0.0, 0.0, 0.0, 128 / 255)
    assert rgba_to_hex(hex_to_rgba("#28a809")) == "#28a809"


@pytest.mark.parametrize("text", ["#12345", "#zzzzzz", "", "#1234567890"])
def test_bad_hex_raises(text):
    with pytest.raises(ValueError):
        hex_to_rgba(text)


def test_builtin_schemes():
    assert [s.name for s in BUILTIN_SCHEMES] == ["Default", "Electric", "Fire", "Arctic"]
    assert DEFAULT_SCHEME.primary == hex_to_rgba("#28a809")
    assert ELECTRIC_SCHEME.background == hex_to_rgba("#000033")


def test_clamp():
    assert clamp(5.0, SPEED_RANGE) == 2.0
    assert clamp(0.0, BRIGHTNESS_RANGE) == 0.1
    assert clamp(float("nan"), SPEED_RANGE) == 0.5
    assert clamp("fast", SPEED_RANGE) == 0.5
    assert clamp(None, BRIGHTNESS_RANGE) == 0.7


def test_config_defaults_and_clamped():
    config = PatternConfig()
    assert (config.speed, config.brightness, config.line_width) == (0.5, 0.7, 1.0)
    assert config.color_scheme is DEFAULT_SCHEME

    wild = PatternConfig(speed=9, brightness=-1, line_width=100)
    clamped = wild.clamped()
    assert (clamped.speed, clamped.brightness, clamped.line_width) == (2.0, 0.1, 5.0)
    assert wild.speed == 9


def test_duplicate_scheme():
    copy = ELECTRIC_SCHEME.duplicate()
    assert copy.name == "Electric Copy"
    assert copy.id != ELECTRIC_SCHEME.id
    assert copy.primary == ELECTRIC_SCHEME.primary


def test_remove_scheme_falls_back_to_default():
    settings = PatternSettings()
    custom = ColorScheme.from_hex("Mine", "#111", "#222", "#333", "#000")
    settings.add_scheme(custom)
    settings.update_settings(PatternMode.HEAT_PULSE, PatternConfig(color_scheme=custom))

    settings.remove_scheme(custom.id)
    assert custom not in settings.schemes
    assert settings.settings_for(PatternMode.HEAT_PULSE).color_scheme is DEFAULT_SCHEME

    with pytest.raises(ValueError):
        settings.remove_scheme(DEFAULT_SCHEME.id)


def test_settings_for_creates_default():
    settings = PatternSettings()
    config = settings.settings_for(PatternMode.STRESS_WAVE)
    assert config is settings.settings_for(PatternMode.STRESS_WAVE)
    assert config.speed == 0.5


def test_unknown_scheme_name():
    with pytest.raises(ValueError):
        PatternSettings().scheme_named("Plaid")


DOCUMENT = {
    'intensity': 0.8,
    'schemes': [
        {'name': "Mine", 'primary': "#111111", 'secondary': "#222222",
         'accent': "#333333", 'background': "#000000"},
        {'name': "Fire", 'primary': "#000", 'secondary': "#000", 'accent': "#000", 'background': "#000"},
    ],
    'settings': {
        'heat_pulse': {'speed': 1.5, 'brightness': 0.9, 'scheme': "Mine"},
        'Signal Mesh': {'speed': 40, 'line_width': 2.0},
    },
}


def test_load_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(DOCUMENT))
    settings = SettingsLoader.from_json(str(path))

    assert settings.intensity == 0.8
    assert [s.name for s in settings.schemes] == ["Default", "Electric", "Fire", "Arctic", "Mine"]
    # Built-in names are never overridden
    assert settings.scheme_named("Fire").primary == hex_to_rgba("#ff4500")

    heat = settings.settings_for(PatternMode.HEAT_PULSE)
    assert heat.speed == 1.5
    assert heat.color_scheme.name == "Mine"
    mesh = settings.settings_for(PatternMode.SIGNAL_MESH)
    assert mesh.speed == 2.0
    assert mesh.line_width == 2.0


def test_load_yaml(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "intensity: 0.3\n"
        "settings:\n"
        "  neuro_spark:\n"
        "    brightness: 0.4\n"
        "    scheme: Arctic\n"
    )
    settings = SettingsLoader.from_yaml(str(path))
    assert settings.intensity == 0.3
    spark = settings.settings_for(PatternMode.NEURO_SPARK)
    assert spark.brightness == 0.4
    assert spark.color_scheme.name == "Arctic"


def test_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    settings = SettingsLoader.from_yaml(str(path))
    assert len(settings.schemes) == 4
    assert settings.intensity == 0.5


def test_unknown_mode_in_document():
    with pytest.raises(ValueError):
        SettingsLoader.from_dict({'settings': {'plasma': {}}})


def test_to_dict_shape():
    settings = SettingsLoader.from_dict(DOCUMENT)
    data = SettingsLoader.to_dict(settings)
    assert set(data) == {'intensity', 'schemes', 'settings'}
    assert data['settings']['heat_pulse'] == {'speed': 1.5, 'brightness': 0.9, 'line_width': 1.0, 'scheme': "Mine"}
    assert data['schemes'][0]['primary'] == "#28a809"


def test_export_formats():
    assert ExportFormat.INSTAGRAM.canvas_for(1600) == Canvas(900, 1600)
    assert ExportFormat.LANDSCAPE.aspect_ratio == pytest.approx(16 / 9)
    assert math.isclose(ExportFormat.SQUARE.canvas_for(500).width, 500)
    with pytest.raises(ValueError):
        Canvas(0, 10)
