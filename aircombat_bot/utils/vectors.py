import math
import numpy as np

WORLD_UP = np.array([0.0, 0.0, 1.0])
EPSILON = 1e-9


# === VECTOR HELPERS ===
def normalize(v):
    """Unit vector along v, or the zero vector when v is degenerate."""
    n = np.linalg.norm(v)
    if n < EPSILON:
        return np.zeros(3)
    return v / n


def project(v, onto):
    """Component of v along the unit vector `onto`."""
    return onto * float(np.dot(v, onto))


def angle_deg(a, b):
    """Unsigned angle between two vectors in degrees (0 if either is zero)."""
    na = np.linalg.norm(a)
    nb = np.linalg.norm(b)
    if na < EPSILON or nb < EPSILON:
        return 0.0
    cos_a = float(np.dot(a, b)) / (na * nb)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos_a))))


def signed_angle_deg(a, b, axis):
    """
    Angle from a to b measured about `axis`, after projecting both onto the
    plane perpendicular to it. Positive is a right-hand rotation about axis.
    """
    axis = normalize(axis)
    pa = normalize(a - project(a, axis))
    pb = normalize(b - project(b, axis))
    if not pa.any() or not pb.any():
        return 0.0
    sin_a = float(np.dot(np.cross(pa, pb), axis))
    cos_a = float(np.dot(pa, pb))
    return math.degrees(math.atan2(sin_a, cos_a))


def rotate(v, axis, degrees):
    """Rodrigues rotation of v about a unit axis (right-hand rule)."""
    axis = normalize(axis)
    if not axis.any():
        return np.array(v, dtype=float)
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    return v * c + np.cross(axis, v) * s + axis * float(np.dot(axis, v)) * (1.0 - c)


def orthonormalize(forward, up):
    """Re-square a forward/up basis after accumulated rotations."""
    forward = normalize(forward)
    right = normalize(np.cross(forward, up))
    if not right.any():
        # Forward is parallel to the supplied up; pick any perpendicular
        right = normalize(np.cross(forward, np.array([1.0, 0.0, 0.0])))
        if not right.any():
            right = normalize(np.cross(forward, np.array([0.0, 1.0, 0.0])))
    up = np.cross(right, forward)
    return forward, normalize(up)


def heading_vector(heading_deg):
    """Horizontal unit vector for a compass heading (0 = North/+y, 90 = East/+x)."""
    h = math.radians(heading_deg)
    return np.array([math.sin(h), math.cos(h), 0.0])


def heading_of(forward):
    return math.degrees(math.atan2(forward[0], forward[1])) % 360.0


# === SCALAR HELPERS ===
def clamp(value, lo, hi):
    # Lower bound is checked first, so lo wins when lo > hi
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def clamp01(value):
    return clamp(value, 0.0, 1.0)


def lerp(a, b, t):
    """Linear interpolation with t clamped to [0, 1]; works on scalars and arrays."""
    t = clamp01(t)
    return a + (b - a) * t


def inverse_lerp(a, b, value):
    if abs(b - a) < EPSILON:
        return 0.0
    return clamp01((value - a) / (b - a))


def smooth_damp(current, target, velocity, smooth_time, dt):
    """
    Critically damped approach of `current` toward `target`.

    Returns (new_value, new_velocity). Never overshoots the target.
    """
    smooth_time = max(1e-4, smooth_time)
    omega = 2.0 / smooth_time
    x = omega * dt
    decay = 1.0 / (1.0 + x + 0.48 * x * x + 0.235 * x * x * x)
    change = current - target
    temp = (velocity + omega * change) * dt
    velocity = (velocity - omega * temp) * decay
    output = target + (change + temp) * decay

    # Overshoot guard
    if (target - current > 0.0) == (output > target):
        output = target
        velocity = (output - target) / dt if dt > 0 else 0.0
    return output, velocity
