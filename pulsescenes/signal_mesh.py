import numpy as np

from pulsecore.primitives import Circle, Line

ROWS = 8
COLS = 6
NODE_RADIUS = 4.0
PHASE_STEP = 0.1


def mesh_primitives(phase, config, canvas):
    """
    Grid of pulsating lines with a node at every intersection.
    Pure function of (phase, config, canvas).
    """
    scheme = config.color_scheme
    width, height = canvas.width, canvas.height

    cols = np.arange(COLS)
    rows = np.arange(ROWS)
    xs = width / (COLS - 1) * cols
    ys = height / (ROWS - 1) * rows

    vertical_opacity = 0.3 + 0.7 * np.sin(phase + cols * 0.5) * config.brightness
    horizontal_opacity = 0.3 + 0.7 * np.sin(phase + rows * 0.5) * config.brightness

    primitives = []
    for col in cols:
        primitives.append(Line(
            start=(float(xs[col]), 0.0),
            end=(float(xs[col]), float(height)),
            color=scheme.accent,
            opacity=float(vertical_opacity[col]),
            width=config.line_width,
        ))
    for row in rows:
        primitives.append(Line(
            start=(0.0, float(ys[row])),
            end=(float(width), float(ys[row])),
            color=scheme.accent,
            opacity=float(horizontal_opacity[row]),
            width=config.line_width,
        ))

    # Node terms depend on row + col only
    diag = rows[:, None] + cols[None, :]
    node_opacity = 0.5 + 0.5 * np.sin(phase + diag * 0.3)
    node_scale = 1 + 0.5 * np.sin(phase + diag * 0.2)
    for row in rows:
        for col in cols:
            primitives.append(Circle(
                center=(float(xs[col]), float(ys[row])),
                radius=NODE_RADIUS,
                color=scheme.secondary,
                opacity=float(node_opacity[row, col]),
                scale=float(node_scale[row, col]),
            ))
    return primitives


def signal_mesh(instate, outstate):
    """Network-like grid; no entities, only the phase accumulator"""
    config = outstate['config']

    if instate['count'] == 0:
        instate['phase'] = 0.0
        instate['primitives'] = mesh_primitives(instate['phase'], config, instate['canvas'])
        return

    if instate['count'] == -1:
        instate['primitives'] = []
        return

    instate['phase'] += PHASE_STEP * outstate['intensity'] * config.speed
    instate['primitives'] = mesh_primitives(instate['phase'], config, instate['canvas'])
