import numpy as np
import pytest

from pulsecore.primitives import Canvas
from pulsecore.settings import PatternConfig


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def canvas():
    return Canvas(400, 300)


@pytest.fixture
def unit_config():
    return PatternConfig(speed=1.0, brightness=1.0, line_width=1.0)


@pytest.fixture
def run_scene(canvas, rng):
    """Drive a scene function by hand: setup call, then n ticks. Returns the instate dict."""

    def run(scene, ticks, config, intensity=1.0, state_canvas=None):
        instate = {'count': 0, 'canvas': state_canvas or canvas, 'phase': 0.0, 'primitives': []}
        outstate = {'config': config, 'intensity': intensity, 'rng': rng, 'current_time': 0.0}
        scene(instate, outstate)
        instate['count'] += 1
        for _ in range(ticks):
            scene(instate, outstate)
            instate['count'] += 1
        return instate

    return run
