import math

import pytest

from pulsecore.settings import PatternConfig
from pulsescenes.heat_pulse import RING_COUNT, SPOT_COUNT, SPOT_ORBIT, heat_primitives, heat_pulse


def test_rings_and_spots(canvas):
    config = PatternConfig(brightness=0.8)
    phase = 1.3
    primitives = heat_primitives(phase, config, canvas)
    rings, spots = primitives[:RING_COUNT], primitives[RING_COUNT:]

    assert len(rings) == 5
    assert len(spots) == SPOT_COUNT == 8

    for k, ring in enumerate(rings):
        assert ring.center == canvas.center
        assert ring.radius == 200 + 50 * k
        assert ring.scale == pytest.approx(0.5 + 0.5 * math.sin(phase - k * 0.5))
        assert ring.opacity == pytest.approx((0.3 + 0.4 * math.sin(phase - k * 0.3)) * 0.8)


def test_spots_orbit_at_fixed_radius(canvas, unit_config):
    phase = 2.0
    spots = heat_primitives(phase, unit_config, canvas)[RING_COUNT:]
    cx, cy = canvas.center

    for k, spot in enumerate(spots):
        angle = k * math.pi / 4 + phase * 0.5
        assert spot.center[0] == pytest.approx(cx + math.cos(angle) * SPOT_ORBIT)
        assert spot.center[1] == pytest.approx(cy + math.sin(angle) * SPOT_ORBIT)
        assert math.hypot(spot.center[0] - cx, spot.center[1] - cy) == pytest.approx(150.0)
        assert spot.opacity == pytest.approx(0.4 + 0.6 * math.sin(phase + k * 0.2))


def test_deterministic(canvas, unit_config):
    assert heat_primitives(0.9, unit_config, canvas) == heat_primitives(0.9, unit_config, canvas)


def test_phase_advances_slowly(run_scene, unit_config):
    instate = run_scene(heat_pulse, 10, unit_config, intensity=1.0)
    assert instate['phase'] == pytest.approx(10 * 0.05)
