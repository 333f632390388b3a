from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple
import json
import logging
import math
import uuid

import yaml

from pulsescenes.imgutils import hex_to_rgba, rgba_to_hex
from pulsescenes.modes import PatternMode

logger = logging.getLogger("pulsegrid.settings")

RGBA = Tuple[float, float, float, float]

# Documented ranges: (low, high, default)
SPEED_RANGE = (0.1, 2.0, 0.5)
BRIGHTNESS_RANGE = (0.1, 1.0, 0.7)
LINE_WIDTH_RANGE = (0.5, 5.0, 1.0)
INTENSITY_RANGE = (0.1, 1.0, 0.5)


def clamp(value, value_range):
    """Clamp value into (low, high, default); NaN or junk falls back to the default"""
    low, high, default = value_range
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(value):
        return default
    return max(low, min(high, value))


@dataclass(frozen=True)
class ColorScheme:
    """Named four-colour palette. Immutable; configs reference it, never edit it."""

    name: str
    primary: RGBA
    secondary: RGBA
    accent: RGBA
    background: RGBA
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_hex(cls, name, primary, secondary, accent, background, id=None):
        kwargs = {}
        if id is not None:
            kwargs['id'] = id
        return cls(
            name=name,
            primary=hex_to_rgba(primary),
            secondary=hex_to_rgba(secondary),
            accent=hex_to_rgba(accent),
            background=hex_to_rgba(background),
            **kwargs,
        )

    def duplicate(self):
        """Copy under the name '<name> Copy' with a fresh id"""
        return replace(self, name=f"{self.name} Copy", id=uuid.uuid4().hex)

    def to_dict(self):
        return {
            'name': self.name,
            'primary': rgba_to_hex(self.primary),
            'secondary': rgba_to_hex(self.secondary),
            'accent': rgba_to_hex(self.accent),
            'background': rgba_to_hex(self.background),
        }


DEFAULT_SCHEME = ColorScheme.from_hex("Default", "#28a809", "#e6053a", "#d17305", "#0e0e0e", id="default")
ELECTRIC_SCHEME = ColorScheme.from_hex("Electric", "#00ffff", "#ff00ff", "#ffff00", "#000033", id="electric")
FIRE_SCHEME = ColorScheme.from_hex("Fire", "#ff4500", "#ffd700", "#ff6347", "#1a0000", id="fire")
ARCTIC_SCHEME = ColorScheme.from_hex("Arctic", "#87ceeb", "#4682b4", "#b0c4de", "#001122", id="arctic")

BUILTIN_SCHEMES = [DEFAULT_SCHEME, ELECTRIC_SCHEME, FIRE_SCHEME, ARCTIC_SCHEME]


@dataclass
class PatternConfig:
    """User-tunable parameters of one pattern mode. Mutated by the UI, read by the engine."""

    speed: float = SPEED_RANGE[2]
    brightness: float = BRIGHTNESS_RANGE[2]
    line_width: float = LINE_WIDTH_RANGE[2]
    color_scheme: ColorScheme = DEFAULT_SCHEME

    def clamped(self):
        """Copy with every value pulled into its documented range"""
        return PatternConfig(
            speed=clamp(self.speed, SPEED_RANGE),
            brightness=clamp(self.brightness, BRIGHTNESS_RANGE),
            line_width=clamp(self.line_width, LINE_WIDTH_RANGE),
            color_scheme=self.color_scheme,
        )

    def snapshot(self):
        return replace(self)

    def to_dict(self):
        return {
            'speed': self.speed,
            'brightness': self.brightness,
            'line_width': self.line_width,
            'scheme': self.color_scheme.name,
        }


class PatternSettings:
    """Per-mode configs plus the list of named colour schemes"""

    def __init__(self, schemes: Optional[List[ColorScheme]] = None, intensity: float = INTENSITY_RANGE[2]):
        self.schemes: List[ColorScheme] = list(schemes) if schemes else list(BUILTIN_SCHEMES)
        self.configs: Dict[PatternMode, PatternConfig] = {}
        self.intensity = clamp(intensity, INTENSITY_RANGE)

    def settings_for(self, mode: PatternMode) -> PatternConfig:
        if mode not in self.configs:
            self.configs[mode] = PatternConfig(color_scheme=self.schemes[0])
        return self.configs[mode]

    def update_settings(self, mode: PatternMode, config: PatternConfig) -> None:
        self.configs[mode] = config

    def scheme_named(self, name: str) -> ColorScheme:
        for scheme in self.schemes:
            if scheme.name == name:
                return scheme
        raise ValueError(f"Unknown colour scheme: {name}")

    def add_scheme(self, scheme: ColorScheme) -> None:
        self.schemes.append(scheme)

    def remove_scheme(self, scheme_id: str) -> None:
        if scheme_id == DEFAULT_SCHEME.id:
            raise ValueError("The Default colour scheme cannot be removed")
        self.schemes = [s for s in self.schemes if s.id != scheme_id]
        # Configs pointing at a removed scheme fall back to Default
        for config in self.configs.values():
            if config.color_scheme.id == scheme_id:
                config.color_scheme = DEFAULT_SCHEME


class SettingsLoader:
    """Utilities for loading scheme and per-mode settings documents"""

    @staticmethod
    def from_json(file_path: str) -> PatternSettings:
        with open(file_path, 'r') as f:
            data = json.load(f)
        return SettingsLoader.from_dict(data)

    @staticmethod
    def from_yaml(file_path: str) -> PatternSettings:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
        return SettingsLoader.from_dict(data or {})

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PatternSettings:
        schemes = list(BUILTIN_SCHEMES)
        builtin_names = {s.name for s in schemes}
        for scheme_data in data.get('schemes', []):
            if scheme_data['name'] in builtin_names:
                continue
            schemes.append(ColorScheme.from_hex(
                scheme_data['name'],
                scheme_data['primary'],
                scheme_data['secondary'],
                scheme_data['accent'],
                scheme_data['background'],
            ))

        settings = PatternSettings(schemes, intensity=data.get('intensity', INTENSITY_RANGE[2]))

        for mode_name, config_data in data.get('settings', {}).items():
            mode = PatternMode.from_name(mode_name)
            scheme = settings.scheme_named(config_data.get('scheme', DEFAULT_SCHEME.name))
            config = PatternConfig(
                speed=config_data.get('speed', SPEED_RANGE[2]),
                brightness=config_data.get('brightness', BRIGHTNESS_RANGE[2]),
                line_width=config_data.get('line_width', LINE_WIDTH_RANGE[2]),
                color_scheme=scheme,
            )
            clamped = config.clamped()
            if clamped != config:
                logger.warning(f"Settings for {mode.value} were out of range and have been clamped")
            settings.update_settings(mode, clamped)

        logger.debug(f"Loaded {len(settings.schemes)} schemes and {len(settings.configs)} mode settings")
        return settings

    @staticmethod
    def to_dict(settings: PatternSettings) -> Dict[str, Any]:
        return {
            'intensity': settings.intensity,
            'schemes': [s.to_dict() for s in settings.schemes],
            'settings': {mode.key: config.to_dict() for mode, config in settings.configs.items()},
        }
