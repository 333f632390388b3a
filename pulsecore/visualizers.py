import cv2
import numpy as np

from pulsecore.primitives import Circle, GradientLine, Line, Polyline, RadialGradient
from pulsecore.settings import DEFAULT_SCHEME
from pulsescenes.imgutils import rgba_to_bgr255

GRADIENT_STEPS = 6


def _blend(canvas, overlay, alpha):
    alpha = float(np.clip(alpha, 0.0, 1.0))
    if alpha <= 0.0:
        return canvas
    return cv2.addWeighted(overlay, alpha, canvas, 1.0 - alpha, 0)


def _pt(point, origin=(0, 0)):
    return (int(round(point[0] + origin[0])), int(round(point[1] + origin[1])))


def _mix(a, b, t):
    return tuple(a[i] + (b[i] - a[i]) * t for i in range(4))


def _draw(image, primitive, origin=(0, 0)):
    overlay = image.copy()

    if isinstance(primitive, Line):
        thickness = max(1, int(round(primitive.width)))
        cv2.line(overlay, _pt(primitive.start, origin), _pt(primitive.end, origin),
                 rgba_to_bgr255(primitive.color), thickness, cv2.LINE_AA)
        return _blend(image, overlay, primitive.opacity * primitive.color[3])

    if isinstance(primitive, GradientLine):
        # Two halves are enough for a preview
        thickness = max(1, int(round(primitive.width)))
        mid = ((primitive.start[0] + primitive.end[0]) / 2, (primitive.start[1] + primitive.end[1]) / 2)
        cv2.line(overlay, _pt(primitive.start, origin), _pt(mid, origin),
                 rgba_to_bgr255(primitive.start_color), thickness, cv2.LINE_AA)
        cv2.line(overlay, _pt(mid, origin), _pt(primitive.end, origin),
                 rgba_to_bgr255(primitive.end_color), thickness, cv2.LINE_AA)
        alpha = (primitive.start_color[3] + primitive.end_color[3]) / 2
        return _blend(image, overlay, primitive.opacity * alpha)

    if isinstance(primitive, Polyline):
        thickness = max(1, int(round(primitive.width)))
        points = np.round(primitive.points + np.asarray(origin)).astype(np.int32).reshape(-1, 1, 2)
        cv2.polylines(overlay, [points], False, rgba_to_bgr255(primitive.color), thickness, cv2.LINE_AA)
        return _blend(image, overlay, primitive.opacity * primitive.color[3])

    if isinstance(primitive, Circle):
        radius = max(1, int(round(primitive.radius * primitive.scale)))
        cv2.circle(overlay, _pt(primitive.center, origin), radius,
                   rgba_to_bgr255(primitive.color), -1, cv2.LINE_AA)
        return _blend(image, overlay, primitive.opacity * primitive.color[3])

    if isinstance(primitive, RadialGradient):
        radius = primitive.radius * primitive.scale
        if radius < 1:
            return image
        # Concentric discs from the rim inwards, each a step along the stops
        segments = len(primitive.stops) - 1
        for step in range(GRADIENT_STEPS, 0, -1):
            t = step / GRADIENT_STEPS
            position = (1 - t) * segments
            index = min(int(position), segments - 1)
            color = _mix(primitive.stops[index], primitive.stops[index + 1], position - index)
            layer = image.copy()
            cv2.circle(layer, _pt(primitive.center, origin), max(1, int(round(radius * t))),
                       rgba_to_bgr255(color), -1, cv2.LINE_AA)
            image = _blend(image, layer, primitive.opacity * color[3] / GRADIENT_STEPS * 2)
        return image

    raise TypeError(f"Cannot draw primitive of type {type(primitive).__name__}")


def render_frame(frame, scheme=None, image=None, origin=(0, 0)):
    """
    Rasterize a Frame into a BGR uint8 image.

    Pass image/origin to draw into a region of a larger board.
    """
    scheme = scheme or DEFAULT_SCHEME
    if image is None:
        height, width = int(round(frame.canvas.height)), int(round(frame.canvas.width))
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[:] = rgba_to_bgr255(scheme.background)
    for primitive in frame.primitives:
        image = _draw(image, primitive, origin)
    return image


def create_pattern_visualizer(width, height, window_name="PulseGrid Preview"):
    """Creates an OpenCV window that shows engine frames"""

    class PatternVisualizer:
        def __init__(self, width, height, window_name):
            self.width = int(width)
            self.height = int(height)
            self.window_name = window_name
            cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
            cv2.resizeWindow(self.window_name, self.width, self.height)

        def update(self, placed_frames, background=None):
            """placed_frames: iterable of (frame, scheme, (x, y)) tuples"""
            background = background or DEFAULT_SCHEME.background
            canvas = np.zeros((self.height, self.width, 3), dtype=np.uint8)
            canvas[:] = rgba_to_bgr255(background)
            for frame, scheme, origin in placed_frames:
                corner = _pt((frame.canvas.width, frame.canvas.height), origin)
                cv2.rectangle(canvas, _pt(origin), corner, rgba_to_bgr255(scheme.background), -1)
                canvas = render_frame(frame, scheme, image=canvas, origin=origin)
            cv2.imshow(self.window_name, canvas)
            return cv2.waitKey(1) & 0xFF

        def close(self):
            cv2.destroyWindow(self.window_name)

    return PatternVisualizer(width, height, window_name)
