"""
World geometry that answers ray queries for terrain avoidance.

Every surface implements `cast(origin, direction, max_distance)` and returns a
RayHit or None. TerrainWorld composes surfaces on Layer flags and answers the
masked query the pilots use.
"""
import enum
import math
from dataclasses import dataclass

import numpy as np

from aircombat_bot.utils.vectors import normalize, EPSILON


class Layer(enum.IntFlag):
    NONE = 0
    TERRAIN = 1
    OBSTACLE = 2
    ALL = TERRAIN | OBSTACLE


@dataclass(frozen=True)
class RayHit:
    distance: float
    point: np.ndarray
    normal: np.ndarray
    layer: Layer = Layer.TERRAIN


class FlatGround:
    """Infinite horizontal plane at a fixed height."""

    def __init__(self, height=0.0):
        self.height = float(height)

    def height_at(self, x, y):
        return self.height

    def cast(self, origin, direction, max_distance):
        d = normalize(direction)
        clearance = origin[2] - self.height
        if clearance < 0.0:
            return None
        if d[2] >= -EPSILON:
            return None  # Parallel or climbing away
        t = clearance / -d[2]
        if t > max_distance:
            return None
        return RayHit(t, origin + d * t, np.array([0.0, 0.0, 1.0]))


class Heightfield:
    """
    Regular grid of terrain heights with bilinear interpolation.

    heights[i, j] is the height at x = origin_x + j * cell_size,
    y = origin_y + i * cell_size. Queries outside the grid clamp to its edge.
    """

    def __init__(self, heights, origin=(0.0, 0.0), cell_size=100.0,
                 step_factor=0.5, min_step=1.0, refine_iterations=24):
        self.heights = np.asarray(heights, dtype=float)
        if self.heights.ndim != 2 or min(self.heights.shape) < 2:
            raise ValueError("heights must be a 2D grid of at least 2x2 samples")
        self.origin = (float(origin[0]), float(origin[1]))
        self.cell_size = float(cell_size)
        self.step_factor = step_factor
        self.min_step = min_step
        self.refine_iterations = refine_iterations

    @classmethod
    def from_function(cls, fn, x_range, y_range, cell_size=100.0, **kwargs):
        """Sample fn(x, y) on a grid covering the given ranges."""
        xs = np.arange(x_range[0], x_range[1] + cell_size, cell_size)
        ys = np.arange(y_range[0], y_range[1] + cell_size, cell_size)
        gx, gy = np.meshgrid(xs, ys)
        return cls(fn(gx, gy), origin=(x_range[0], y_range[0]), cell_size=cell_size, **kwargs)

    @classmethod
    def rolling_hills(cls, extent=10000.0, amplitude=400.0, wavelength=3000.0,
                      base_height=0.0, rng=None, cell_size=100.0):
        rng = rng or np.random.default_rng()
        phase_x, phase_y = rng.uniform(0.0, 2.0 * math.pi, size=2)
        k = 2.0 * math.pi / wavelength

        def hills(x, y):
            return base_height + amplitude * (
                0.5 + 0.25 * np.sin(k * x + phase_x) + 0.25 * np.cos(k * 0.7 * y + phase_y))

        half = extent / 2.0
        return cls.from_function(hills, (-half, half), (-half, half), cell_size=cell_size)

    def height_at(self, x, y):
        rows, cols = self.heights.shape
        gx = (x - self.origin[0]) / self.cell_size
        gy = (y - self.origin[1]) / self.cell_size
        gx = min(max(gx, 0.0), cols - 1.0)
        gy = min(max(gy, 0.0), rows - 1.0)
        j0 = min(int(gx), cols - 2)
        i0 = min(int(gy), rows - 2)
        fx = gx - j0
        fy = gy - i0
        h = self.heights
        top = h[i0, j0] * (1.0 - fx) + h[i0, j0 + 1] * fx
        bottom = h[i0 + 1, j0] * (1.0 - fx) + h[i0 + 1, j0 + 1] * fx
        return float(top * (1.0 - fy) + bottom * fy)

    def normal_at(self, x, y):
        e = self.cell_size * 0.5
        dhdx = (self.height_at(x + e, y) - self.height_at(x - e, y)) / (2.0 * e)
        dhdy = (self.height_at(x, y + e) - self.height_at(x, y - e)) / (2.0 * e)
        return normalize(np.array([-dhdx, -dhdy, 1.0]))

    def _clearance(self, point):
        return point[2] - self.height_at(point[0], point[1])

    def cast(self, origin, direction, max_distance):
        d = normalize(direction)
        if not d.any():
            return None

        # March with steps proportional to clearance, then bisect the crossing
        prev_t = 0.0
        t = 0.0
        while True:
            point = origin + d * t
            clearance = self._clearance(point)
            if clearance <= EPSILON:
                if t > 0.0:
                    t = self._refine(origin, d, prev_t, t)
                point = origin + d * t
                return RayHit(t, point, self.normal_at(point[0], point[1]))
            if t >= max_distance:
                return None
            prev_t = t
            t = min(t + max(clearance * self.step_factor, self.min_step), max_distance)

    def _refine(self, origin, d, above_t, below_t):
        for _ in range(self.refine_iterations):
            mid = 0.5 * (above_t + below_t)
            if self._clearance(origin + d * mid) > 0.0:
                above_t = mid
            else:
                below_t = mid
        return below_t


class BoxObstacle:
    """Axis-aligned box (buildings, towers, carrier islands)."""

    def __init__(self, min_corner, max_corner):
        a = np.asarray(min_corner, dtype=float)
        b = np.asarray(max_corner, dtype=float)
        self.min_corner = np.minimum(a, b)
        self.max_corner = np.maximum(a, b)

    def contains(self, point):
        return bool(np.all(point >= self.min_corner) and np.all(point <= self.max_corner))

    def height_at(self, x, y):
        if self.min_corner[0] <= x <= self.max_corner[0] and self.min_corner[1] <= y <= self.max_corner[1]:
            return float(self.max_corner[2])
        return -math.inf

    def cast(self, origin, direction, max_distance):
        d = normalize(direction)
        if not d.any() or self.contains(origin):
            return None

        t_near, t_far = -math.inf, math.inf
        hit_axis = -1
        for axis in range(3):
            if abs(d[axis]) < EPSILON:
                if origin[axis] < self.min_corner[axis] or origin[axis] > self.max_corner[axis]:
                    return None
                continue
            t1 = (self.min_corner[axis] - origin[axis]) / d[axis]
            t2 = (self.max_corner[axis] - origin[axis]) / d[axis]
            if t1 > t2:
                t1, t2 = t2, t1
            if t1 > t_near:
                t_near = t1
                hit_axis = axis
            t_far = min(t_far, t2)
            if t_near > t_far:
                return None

        if t_near < 0.0 or t_near > max_distance or hit_axis < 0:
            return None
        normal = np.zeros(3)
        normal[hit_axis] = -math.copysign(1.0, d[hit_axis])
        return RayHit(t_near, origin + d * t_near, normal, Layer.OBSTACLE)


class TerrainWorld:
    """
    Collection of surfaces answering `cast(origin, direction, max_distance, mask)`.
    The nearest hit among surfaces whose layer is in `mask` wins.
    """

    def __init__(self, ground=None):
        self.surfaces = []
        if ground is not None:
            self.add(ground, Layer.TERRAIN)

    def add(self, surface, layer=Layer.OBSTACLE):
        self.surfaces.append((surface, Layer(layer)))
        return surface

    def ground_height(self, x, y):
        heights = [s.height_at(x, y) for s, layer in self.surfaces if layer & Layer.TERRAIN]
        return max(heights) if heights else -math.inf

    def cast(self, origin, direction, max_distance, mask=Layer.ALL):
        origin = np.asarray(origin, dtype=float)
        best = None
        for surface, layer in self.surfaces:
            if not layer & mask:
                continue
            hit = surface.cast(origin, direction, max_distance)
            if hit is None:
                continue
            if best is None or hit.distance < best.distance:
                best = RayHit(hit.distance, hit.point, hit.normal, layer)
        return best
