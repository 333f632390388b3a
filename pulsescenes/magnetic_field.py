import numpy as np

from pulsecore.primitives import RadialGradient
from pulsescenes.imgutils import with_alpha

PARTICLE_COUNT = 50
PHASE_STEP = 0.05
FIELD_STRENGTH = 200.0
TURN_RATE = 0.01


class ParticlePool:
    """
    Struct-of-arrays particle store for the magnetic field.

    Positions live on a torus: after every step they are wrapped back into
    [0, width) x [0, height). Sizes are fixed at creation.
    """

    def __init__(self, canvas, rng, count=PARTICLE_COUNT):
        self.canvas = canvas
        self.ids = np.arange(count)
        self.x = rng.uniform(0, canvas.width, count)
        self.y = rng.uniform(0, canvas.height, count)
        self.angle = rng.uniform(0, 2 * np.pi, count)
        self.speed = rng.uniform(1.0, 3.0, count)
        self._size = rng.uniform(4.0, 12.0, count)
        self._size.flags.writeable = False
        self.opacity = rng.uniform(0.3, 0.8, count)
        self.wrap()

    def __len__(self):
        return len(self.ids)

    @property
    def size(self):
        return self._size

    def step(self, rate):
        """Turn each particle by the field force at its radius, then move it along its heading"""
        cx, cy = self.canvas.center
        radius = np.hypot(self.x - cx, self.y - cy)
        force = FIELD_STRENGTH / (radius + 1)

        self.angle += force * TURN_RATE * rate
        self.x += np.cos(self.angle) * self.speed * rate
        self.y += np.sin(self.angle) * self.speed * rate
        self.wrap()

    def wrap(self):
        width, height = self.canvas.width, self.canvas.height
        self.x = np.mod(self.x, width)
        self.y = np.mod(self.y, height)
        # np.mod can round a tiny negative up to exactly the bound
        self.x[self.x >= width] = 0.0
        self.y[self.y >= height] = 0.0

    def shimmer(self, time):
        # Opacity follows its own clock, independent of the motion above
        self.opacity = 0.3 + 0.5 * np.sin(time + self.ids * 0.1)


def field_primitives(pool, config):
    scheme = config.color_scheme
    inner = with_alpha(scheme.primary, 0.8 * config.brightness)
    outer = with_alpha(scheme.secondary, 0.4 * config.brightness)
    return [
        RadialGradient(
            center=(float(pool.x[i]), float(pool.y[i])),
            radius=float(pool.size[i]) / 2,
            stops=(inner, outer),
            opacity=float(pool.opacity[i]) * config.brightness,
        )
        for i in range(len(pool))
    ]


def magnetic_field(instate, outstate):
    """Particles swirling around the canvas centre like iron filings in a field"""
    config = outstate['config']

    if instate['count'] == 0:
        instate['phase'] = 0.0
        instate['pool'] = ParticlePool(instate['canvas'], outstate['rng'])
        instate['primitives'] = field_primitives(instate['pool'], config)
        return

    if instate['count'] == -1:
        instate['pool'] = None
        instate['primitives'] = []
        return

    rate = outstate['intensity'] * config.speed
    instate['phase'] += PHASE_STEP * rate

    pool = instate['pool']
    pool.step(rate)
    pool.shimmer(instate['phase'])
    instate['primitives'] = field_primitives(pool, config)
