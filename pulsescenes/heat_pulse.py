import numpy as np

from pulsecore.primitives import RadialGradient
from pulsescenes.imgutils import TRANSPARENT, with_alpha

RING_COUNT = 5
SPOT_COUNT = 8
SPOT_ORBIT = 150.0
SPOT_RADIUS = 40.0
# Slower than the other modes on purpose
PHASE_STEP = 0.05


def heat_primitives(phase, config, canvas):
    """Concentric glowing rings plus hot spots orbiting the centre"""
    scheme = config.color_scheme
    center = canvas.center
    b = config.brightness

    k = np.arange(RING_COUNT)
    ring_scale = 0.5 + 0.5 * np.sin(phase - k * 0.5)
    ring_opacity = (0.3 + 0.4 * np.sin(phase - k * 0.3)) * b
    stops = (with_alpha(scheme.secondary, 0.6 * b), with_alpha(scheme.accent, 0.3 * b), TRANSPARENT)

    primitives = [
        RadialGradient(
            center=center,
            radius=float(200.0 + 50.0 * i),
            stops=stops,
            opacity=float(ring_opacity[i]),
            scale=float(ring_scale[i]),
        )
        for i in k
    ]

    s = np.arange(SPOT_COUNT)
    angle = s * np.pi / 4 + phase * 0.5
    spot_x = center[0] + np.cos(angle) * SPOT_ORBIT
    spot_y = center[1] + np.sin(angle) * SPOT_ORBIT
    spot_opacity = 0.4 + 0.6 * np.sin(phase + s * 0.2)
    spot_stops = (with_alpha(scheme.accent, 0.8), TRANSPARENT)

    primitives.extend(
        RadialGradient(
            center=(float(spot_x[i]), float(spot_y[i])),
            radius=SPOT_RADIUS,
            stops=spot_stops,
            opacity=float(spot_opacity[i]),
        )
        for i in s
    )
    return primitives


def heat_pulse(instate, outstate):
    config = outstate['config']

    if instate['count'] == 0:
        instate['phase'] = 0.0
        instate['primitives'] = heat_primitives(instate['phase'], config, instate['canvas'])
        return

    if instate['count'] == -1:
        instate['primitives'] = []
        return

    instate['phase'] += PHASE_STEP * outstate['intensity'] * config.speed
    instate['primitives'] = heat_primitives(instate['phase'], config, instate['canvas'])
