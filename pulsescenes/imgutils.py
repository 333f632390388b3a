import numpy as np

TRANSPARENT = (0.0, 0.0, 0.0, 0.0)


def hex_to_rgba(hex_string):
    """
    Convert a hex colour string to an RGBA tuple of floats in [0, 1].

    Accepted forms (any leading '#' or other punctuation is ignored):
        RGB       12-bit, each digit repeated
        RRGGBB    24-bit, fully opaque
        AARRGGBB  32-bit with alpha first
    """
    digits = "".join(ch for ch in hex_string if ch.isalnum())
    try:
        value = int(digits, 16)
    except ValueError:
        raise ValueError(f"Invalid hex colour: {hex_string!r}") from None

    if len(digits) == 3:
        a, r, g, b = 255, (value >> 8) * 17, (value >> 4 & 0xF) * 17, (value & 0xF) * 17
    elif len(digits) == 6:
        a, r, g, b = 255, value >> 16, value >> 8 & 0xFF, value & 0xFF
    elif len(digits) == 8:
        a, r, g, b = value >> 24, value >> 16 & 0xFF, value >> 8 & 0xFF, value & 0xFF
    else:
        raise ValueError(f"Invalid hex colour length: {hex_string!r}")

    return (r / 255, g / 255, b / 255, a / 255)


def rgba_to_hex(rgba):
    """Inverse of hex_to_rgba; opaque colours come back as #RRGGBB"""
    r, g, b, a = (int(round(float(np.clip(c, 0, 1)) * 255)) for c in rgba)
    if a == 255:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"#{a:02x}{r:02x}{g:02x}{b:02x}"


def with_alpha(rgba, factor):
    """Scale the alpha channel of a colour by factor"""
    r, g, b, a = rgba
    return (r, g, b, a * factor)


def rgba_to_bgr255(rgba):
    """OpenCV wants BGR ints"""
    r, g, b = (int(round(float(np.clip(c, 0, 1)) * 255)) for c in rgba[:3])
    return (b, g, r)
