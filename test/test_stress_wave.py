import math

import numpy as np
import pytest

from pulsecore.primitives import Canvas, Line, Polyline
from pulsecore.settings import PatternConfig
from pulsescenes.stress_wave import SCANLINES, STRESS_LINES, stress_wave, wave_primitives


def test_line_counts_and_sampling(unit_config):
    canvas = Canvas(400, 300)
    primitives = wave_primitives(0.0, unit_config, canvas, intensity=1.0)
    scanlines = [p for p in primitives if isinstance(p, Polyline)]
    stress = [p for p in primitives if isinstance(p, Line)]

    assert len(scanlines) == SCANLINES == 20
    assert len(stress) == STRESS_LINES == 5

    xs = scanlines[0].points[:, 0]
    assert len(xs) == 101  # 0, 4, ..., 400
    assert xs[0] == 0 and xs[-1] == 400
    np.testing.assert_allclose(np.diff(xs), 4.0)


def test_displacement_formula(canvas):
    config = PatternConfig(speed=1.5, brightness=0.5)
    phase, intensity = 0.4, 0.8
    scanlines = wave_primitives(phase, config, canvas, intensity)[:SCANLINES]

    row = 6
    base_y = canvas.height / 19 * row
    x, y = scanlines[row].points[10]
    assert x == 40.0
    assert y == pytest.approx(base_y + math.sin(phase + x * 0.02 + row * 0.1) * 20 * intensity * 1.5)
    assert scanlines[row].opacity == pytest.approx((0.4 + 0.6 * math.sin(phase + row * 0.1)) * 0.5)


def test_stress_line_opacity(canvas, unit_config):
    phase = 1.1
    stress = wave_primitives(phase, unit_config, canvas, 1.0)[SCANLINES:]
    for k, line in enumerate(stress):
        assert line.start[0] == pytest.approx(canvas.width / 4 * k)
        assert line.opacity == pytest.approx(0.3 + 0.4 * math.sin(phase + k * 0.3))


def test_deterministic(canvas, unit_config):
    assert wave_primitives(3.0, unit_config, canvas, 0.5) == wave_primitives(3.0, unit_config, canvas, 0.5)


def test_phase_linear_in_ticks(run_scene, unit_config):
    instate = run_scene(stress_wave, 25, unit_config, intensity=0.2)
    assert instate['phase'] == pytest.approx(25 * 0.1 * 0.2)
