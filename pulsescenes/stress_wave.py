import numpy as np

from pulsecore.primitives import Line, Polyline

SCANLINES = 20
STRESS_LINES = 5
SAMPLE_SPACING = 4.0
AMPLITUDE = 20.0
PHASE_STEP = 0.1


def wave_primitives(phase, config, canvas, intensity):
    """
    Horizontal scanlines bent by a travelling sine, crossed by vertical stress lines.
    The bend amplitude scales with intensity * speed, so intensity is an input here.
    """
    scheme = config.color_scheme
    width, height = canvas.width, canvas.height

    # Sample x from 0 through width inclusive
    xs = np.arange(0.0, width + SAMPLE_SPACING / 2, SAMPLE_SPACING)
    xs = xs[xs <= width]
    amplitude = AMPLITUDE * intensity * config.speed

    primitives = []
    for row in range(SCANLINES):
        y = height / (SCANLINES - 1) * row
        distortion = np.sin(phase + xs * 0.02 + row * 0.1) * amplitude
        points = np.column_stack((xs, y + distortion))
        primitives.append(Polyline(
            points=points,
            color=scheme.primary,
            opacity=float((0.4 + 0.6 * np.sin(phase + row * 0.1)) * config.brightness),
            width=config.line_width,
        ))

    for k in range(STRESS_LINES):
        x = width / (STRESS_LINES - 1) * k
        primitives.append(Line(
            start=(x, 0.0),
            end=(x, float(height)),
            color=scheme.secondary,
            opacity=float(0.3 + 0.4 * np.sin(phase + k * 0.3)),
            width=1.0,
        ))
    return primitives


def stress_wave(instate, outstate):
    config = outstate['config']
    intensity = outstate['intensity']

    if instate['count'] == 0:
        instate['phase'] = 0.0
        instate['primitives'] = wave_primitives(instate['phase'], config, instate['canvas'], intensity)
        return

    if instate['count'] == -1:
        instate['primitives'] = []
        return

    instate['phase'] += PHASE_STEP * intensity * config.speed
    instate['primitives'] = wave_primitives(instate['phase'], config, instate['canvas'], intensity)
