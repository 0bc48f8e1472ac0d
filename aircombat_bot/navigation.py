import logging

import numpy as np

from aircombat_bot.behavior import BotState, EngagementPolicy
from aircombat_bot.utils.vectors import WORLD_UP, normalize, lerp
from config import Config

logger = logging.getLogger(__name__)


class WaypointSet:
    """
    Patrol route generated once at spawn. The cursor always stays in range.
    """

    def __init__(self, points, random_order=False, rng=None):
        self.points = [np.asarray(p, dtype=float) for p in points]
        self.random_order = random_order
        self.rng = rng or np.random.default_rng()
        self.index = 0

    @classmethod
    def generate(cls, center, size, alt_min, alt_max, count, random_order=False, rng=None):
        """
        Uniform points inside the patrol footprint; altitude is an offset from
        the center's height drawn from [alt_min, alt_max].
        """
        rng = rng or np.random.default_rng()
        center = np.asarray(center, dtype=float)
        points = []
        for _ in range(count):
            x = rng.uniform(-size[0] / 2.0, size[0] / 2.0)
            y = rng.uniform(-size[1] / 2.0, size[1] / 2.0)
            z = rng.uniform(alt_min, alt_max)
            points.append(center + np.array([x, y, z]))
        return cls(points, random_order=random_order, rng=rng)

    def __len__(self):
        return len(self.points)

    @property
    def current(self):
        if not self.points:
            return None
        return self.points[self.index]

    def advance(self):
        if not self.points:
            return None
        if self.random_order:
            self.index = int(self.rng.integers(0, len(self.points)))
        else:
            self.index = (self.index + 1) % len(self.points)
        return self.current


class NavigationPlanner:
    """Turns the behavior state into a single aim point (nav_target)."""

    def __init__(self, settings, waypoints, rng=None, name="bot"):
        self.settings = settings
        self.waypoints = waypoints
        self.rng = rng or np.random.default_rng()
        self.name = name
        self.nav_target = None

    @property
    def ideal_distance(self):
        return (self.settings.engagement_distance_min + self.settings.engagement_distance_max) / 2.0

    def reset(self, entity):
        """Initial aim: first waypoint, or 1km ahead when there is no route."""
        if self.waypoints.current is not None:
            self.nav_target = self.waypoints.current.copy()
        else:
            self.nav_target = entity.position + entity.forward * 1000.0

    def plan(self, state, entity, target, time):
        if state is BotState.PATROL:
            self.track_waypoint(entity.position)
        elif state is BotState.ENGAGE:
            if target is not None:
                self.nav_target = self.engagement_point(entity, target)
        elif state is BotState.EVADE:
            if target is not None:
                self.nav_target = self.evasion_point(entity, target, time)
        # RETURN holds the previous aim point
        return self.nav_target

    def track_waypoint(self, position):
        current = self.waypoints.current
        if current is None:
            return self.nav_target
        if np.linalg.norm(position - current) < self.settings.waypoint_reached_distance:
            current = self.waypoints.advance()
            logger.debug("%s: Waypoint reached, next %d", self.name, self.waypoints.index)
        self.nav_target = current.copy()
        return self.nav_target

    def predicted_position(self, target):
        lead = self.settings.lead_prediction_time * self.settings.skill_level
        return target.position + target.velocity * lead

    def engagement_point(self, entity, target):
        s = self.settings
        predicted = self.predicted_position(target)
        ideal = self.ideal_distance

        if s.policy is EngagementPolicy.AGGRESSIVE:
            # Get behind target with an altitude advantage
            behind = target.position - target.forward * ideal
            behind = behind + WORLD_UP * s.altitude_advantage
            return lerp(predicted, behind, s.skill_level * Config.AGGRESSIVE_BLEND)

        if s.policy is EngagementPolicy.DEFENSIVE:
            # Hold distance and altitude, do not close in
            away = normalize(entity.position - target.position)
            point = target.position + away * ideal
            return point + WORLD_UP * (s.altitude_advantage * Config.DEFENSIVE_ALTITUDE_FACTOR)

        # Escort: stay alongside
        point = target.position + target.right * (ideal * Config.ESCORT_LATERAL_FACTOR)
        point[2] = target.position[2] + Config.ESCORT_ALTITUDE_OFFSET
        return point

    def evasion_point(self, entity, target, time):
        away = normalize(entity.position - target.position)
        perpendicular = normalize(np.cross(away, WORLD_UP))

        # Jink: side flips on a fixed time window
        if time % Config.JINK_PERIOD < Config.JINK_PERIOD / 2.0:
            perpendicular = -perpendicular

        point = entity.position + (away + perpendicular) * Config.EVADE_DISTANCE
        point[2] += self.rng.uniform(*Config.EVADE_JITTER)
        return point
