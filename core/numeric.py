#!/usr/bin/env python3
"""
Numeric Canonicalizer Module
Rounds transform components and renders numbers the way the generated
TypeScript prints them. Common angles are written as multiples of Math.PI.
"""

import math
from decimal import Decimal, ROUND_HALF_UP

import numpy as np

# Angles are matched at 1e-5 radian resolution
ANGLE_TOLERANCE_SCALE = 100000
MAX_PI_FACTOR = 10


def round_scalar(value, precision):
    """Round to a fixed number of fractional digits

    Ties round away from zero, on the exact binary value, like
    Number.prototype.toFixed.

    Args:
        value: Number to round
        precision: Fractional digits

    Returns:
        float: Rounded value
    """
    quantum = Decimal(1).scaleb(-int(precision))
    return float(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value):
    """Render a number like JavaScript does (1 instead of 1.0, never -0)"""
    text = format(Decimal(repr(float(value))).normalize(), 'f')
    if text in ("-0", "-0.0"):
        return "0"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def _js_round(value):
    # Math.round rounds .5 towards +infinity
    return math.floor(value + 0.5)


def round_angle(value, precision):
    """Render an angle, symbolically when it is a rational multiple of pi

    Matches |value| against pi / i and then pi * i for i in 1..10.

    Args:
        value: Angle in radians
        precision: Fractional digits for the decimal fallback

    Returns:
        str: "Math.PI / 2", "-Math.PI", "Math.PI * 2", ... or a decimal number
    """
    scaled = abs(_js_round(float(value) * ANGLE_TOLERANCE_SCALE))
    sign = "-" if value < 0 else ""
    for i in range(1, MAX_PI_FACTOR + 1):
        if scaled == _js_round(math.pi / i * ANGLE_TOLERANCE_SCALE):
            return f"{sign}Math.PI" + (f" / {i}" if i > 1 else "")
    for i in range(1, MAX_PI_FACTOR + 1):
        if scaled == _js_round(math.pi * i * ANGLE_TOLERANCE_SCALE):
            return f"{sign}Math.PI" + (f" * {i}" if i > 1 else "")
    return format_number(round_scalar(value, precision))


def vector_length(vector):
    return float(np.linalg.norm(np.asarray(vector, dtype=float)))


def format_vector(vector, precision):
    """Render a 3-vector as an array literal of rounded components"""
    return "[" + ", ".join(format_number(round_scalar(v, precision)) for v in vector) + "]"


def format_angles(vector, precision):
    """Render Euler angles as an array literal, symbolic where possible"""
    return "[" + ", ".join(round_angle(v, precision) for v in vector) + "]"


def is_default(value, default, precision):
    """True when value rounds to the given default"""
    return round_scalar(value, precision) == round_scalar(default, precision)
