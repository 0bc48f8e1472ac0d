"""
    Implements a Cartesian box that defines the allowable region
    for a bot aircraft (East-North-Up).
"""

import numpy as np


class BoundingVolume:
    def __init__(self, min_x, max_x, min_y, max_y, min_alt, max_alt):
        self.min_x = min_x
        self.max_x = max_x
        self.min_y = min_y
        self.max_y = max_y
        self.min_alt = min_alt
        self.max_alt = max_alt

    @classmethod
    def from_corners(cls, corners):
        """Min/max over every axis of four corner points; altitude range comes from their heights."""
        pts = np.asarray(corners, dtype=float).reshape(-1, 3)
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        return cls(lo[0], hi[0], lo[1], hi[1], lo[2], hi[2])

    @property
    def lower(self):
        return np.array([self.min_x, self.min_y, self.min_alt])

    @property
    def upper(self):
        return np.array([self.max_x, self.max_y, self.max_alt])

    def absolute_position(self, x_rel, y_rel):
        """Map fractions of the footprint ([0,1] on each axis) to an East/North point."""
        x = self.min_x + x_rel * (self.max_x - self.min_x)
        y = self.min_y + y_rel * (self.max_y - self.min_y)
        return x, y

    def clamp(self, position):
        """Clip a position into the box. Returns the clipped point and a per-axis at-edge mask."""
        lower, upper = self.lower, self.upper
        clipped = np.clip(position, lower, upper)
        return clipped, (clipped <= lower) | (clipped >= upper)
