from enum import Enum

from pulsescenes.heat_pulse import heat_pulse, PHASE_STEP as HEAT_STEP
from pulsescenes.magnetic_field import magnetic_field, PHASE_STEP as FIELD_STEP
from pulsescenes.neuro_spark import neuro_spark, PHASE_STEP as SPARK_STEP
from pulsescenes.signal_mesh import signal_mesh, PHASE_STEP as MESH_STEP
from pulsescenes.stress_wave import stress_wave, PHASE_STEP as WAVE_STEP


class PatternMode(Enum):
    SIGNAL_MESH = "Signal Mesh"
    MAGNETIC_FIELD = "Magnetic Field"
    HEAT_PULSE = "Heat Pulse"
    STRESS_WAVE = "Stress Wave"
    NEURO_SPARK = "Neuro Spark"

    @classmethod
    def from_name(cls, name):
        """Accept either the display name ('Heat Pulse') or the key ('heat_pulse')"""
        if isinstance(name, cls):
            return name
        for mode in cls:
            if name in (mode.value, mode.key):
                return mode
        raise ValueError(f"Unknown pattern mode: {name}")

    @property
    def key(self):
        return self.name.lower()

    @property
    def description(self):
        return MODE_INFO[self]['description']

    @property
    def icon_name(self):
        return MODE_INFO[self]['icon']

    @property
    def tick_interval(self):
        """Seconds between ticks; fixed per mode"""
        return MODE_INFO[self]['tick_interval']

    @property
    def base_step(self):
        """Phase advance per tick at intensity 1 and speed 1"""
        return MODE_INFO[self]['base_step']

    @property
    def scene(self):
        return MODE_INFO[self]['scene']


MODE_INFO = {
    PatternMode.SIGNAL_MESH: {
        'description': "Animated grid of pulsating lines creating a network-like pattern",
        'icon': "grid",
        'tick_interval': 0.05,
        'base_step': MESH_STEP,
        'scene': signal_mesh,
    },
    PatternMode.MAGNETIC_FIELD: {
        'description': "Particles moving in swirling motion like electromagnetic fields",
        'icon': "atom",
        'tick_interval': 0.05,
        'base_step': FIELD_STEP,
        'scene': magnetic_field,
    },
    PatternMode.HEAT_PULSE: {
        'description': "Slow glow and fade animations resembling thermal patterns",
        'icon': "thermometer",
        'tick_interval': 0.1,
        'base_step': HEAT_STEP,
        'scene': heat_pulse,
    },
    PatternMode.STRESS_WAVE: {
        'description': "Horizontal distortion waves like material under tension",
        'icon': "waveform",
        'tick_interval': 0.05,
        'base_step': WAVE_STEP,
        'scene': stress_wave,
    },
    PatternMode.NEURO_SPARK: {
        'description': "Random node connections with glow effects like neural networks",
        'icon': "brain",
        'tick_interval': 0.1,
        'base_step': SPARK_STEP,
        'scene': neuro_spark,
    },
}
