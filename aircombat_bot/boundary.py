import numpy as np

from aircombat_bot.utils.map_limits import BoundingVolume
from config import Config


class BoundaryEnforcer:
    """
    Keeps an aircraft inside its operating volume and above the altitude floor.
    The floor is always enforced; the volume only when configured.
    """

    def __init__(self, volume=None, altitude_floor=Config.ALTITUDE_FLOOR,
                 edge_speed=Config.BOUNDARY_EDGE_SPEED):
        self.volume = volume
        self.altitude_floor = altitude_floor
        self.edge_speed = edge_speed

    @classmethod
    def from_settings(cls, settings):
        volume = None
        if settings.bounding_corners is not None:
            volume = BoundingVolume.from_corners(settings.bounding_corners)
        return cls(volume, settings.altitude_floor)

    def enforce(self, entity):
        """
        Returns True when the entity had to be pushed back.

        The volume is applied first and the floor last, so the floor wins when
        a volume's top sits below it.
        """
        clamped = False

        if self.volume is not None:
            pos, at_edge = self.volume.clamp(entity.position)
            # Slow velocity on the axes where we touch an edge
            vel = entity.velocity.copy()
            vel[at_edge] = np.clip(vel[at_edge], -self.edge_speed, self.edge_speed)
            clamped = bool(np.any(pos != entity.position))
            entity.position = pos
            entity.velocity = vel

        if entity.position[2] < self.altitude_floor:
            entity.position[2] = self.altitude_floor
            clamped = True
            # Zero any downward velocity to prevent sinking again
            if entity.velocity[2] < 0.0:
                entity.velocity[2] = 0.0
        return clamped
