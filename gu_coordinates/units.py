"""
Unit helpers shared by the coordinate types.

Conventions:
    - Angles are floats in degrees
    - Lengths are floats in centimetres
    - Pixel counts are ints

Angles are normalised into the signed range (-180, 180] so that the
same direction always has the same representation.
"""

import math
import numpy as np

# Largest distance the inverse projection reports. This is the maximum
# of an unsigned 32-bit millimetre count, expressed in centimetres.
MAX_DISTANCE = 4294967295 / 10.0


def normalise_angle(degrees: float) -> float:
    """
    Normalise an angle into the range (-180, 180].

    Args:
        degrees: Angle in degrees

    Returns:
        Equivalent angle in (-180, 180]
    """
    wrapped = math.fmod(degrees, 360.0)
    if wrapped > 180.0:
        wrapped -= 360.0
    elif wrapped <= -180.0:
        wrapped += 360.0
    return wrapped


def normalise_angles(degrees: np.ndarray) -> np.ndarray:
    """Vectorised `normalise_angle`."""
    wrapped = np.fmod(np.asarray(degrees, dtype=np.float64), 360.0)
    wrapped = np.where(wrapped > 180.0, wrapped - 360.0, wrapped)
    return np.where(wrapped <= -180.0, wrapped + 360.0, wrapped)


def require_finite(name: str, value: float) -> float:
    """Return `value` as a float, rejecting NaN and infinities."""
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


def require_integer(name: str, value) -> int:
    """Return `value` as an int, rejecting fractional and non-finite values."""
    if isinstance(value, (int, np.integer)):
        return int(value)
    number = require_finite(name, value)
    if not number.is_integer():
        raise ValueError(f"{name} must be a whole number of pixels, got {value}")
    return int(number)


def require_resolution(res_width: int, res_height: int) -> None:
    """Reject resolutions that cannot address a single pixel."""
    if res_width <= 0 or res_height <= 0:
        raise ValueError(
            f"Resolution must be positive, got {res_width}x{res_height}"
        )


def cap_distance(distance: float) -> float:
    """Clamp a computed distance into [0, MAX_DISTANCE]."""
    if not math.isfinite(distance) or distance > MAX_DISTANCE:
        return MAX_DISTANCE
    return max(distance, 0.0)
