"""
Predictive terrain and obstacle avoidance.

Runs every physics tick before the stick inputs are committed. It blends the
pitch/roll/throttle inputs toward escape values and reports a priority; above
Config.OVERRIDE_PRIORITY the navigation steering is skipped for that tick.
"""
import logging

import numpy as np

from aircombat_bot.terrain import Layer
from aircombat_bot.utils.vectors import WORLD_UP, clamp, inverse_lerp, lerp
from config import Config

logger = logging.getLogger(__name__)


class TerrainAvoidance:
    def __init__(self, settings, terrain=None, name="bot"):
        self.settings = settings
        self.terrain = terrain
        self.name = name
        self.avoiding = False
        self.priority = 0.0
        self.agl = None
        self.lookahead_distance = 0.0
        self.last_hit = None

        if not self.has_terrain_query:
            # Logged once; avoidance degrades to an altitude check
            logger.error("%s: Terrain query NOT SET (no world or empty mask). "
                         "Falling back to minimum-altitude avoidance only.", self.name)

    @property
    def has_terrain_query(self):
        return self.terrain is not None and Layer(self.settings.terrain_mask) != Layer.NONE

    @property
    def overrides_steering(self):
        return self.avoiding and self.priority > Config.OVERRIDE_PRIORITY

    def lookahead(self, speed):
        s = self.settings
        return clamp(speed * s.lookahead_time, Config.LOOKAHEAD_MIN_DISTANCE,
                     min(s.terrain_check_distance, speed * s.lookahead_time_max))

    def apply(self, entity, inputs, dt):
        s = self.settings
        self.avoiding = False
        self.priority = 0.0
        self.last_hit = None

        if not self.has_terrain_query:
            self.agl = None
            if entity.altitude < s.min_altitude:
                self.avoiding = True
                self.priority = 1.0
                inputs.pitch = lerp(inputs.pitch, 1.0, dt * Config.GROUND_BLEND_RATE)
                inputs.throttle = 1.0
            return self.avoiding

        mask = s.terrain_mask

        # === GROUND CLEARANCE (hard deck) ===
        ground = self.terrain.cast(entity.position, -WORLD_UP, Config.GROUND_PROBE_DISTANCE, mask)
        self.agl = None
        emergency_pitch = None
        if ground is not None:
            agl = entity.altitude - float(ground.point[2])
            self.agl = agl
            if agl < max(s.min_altitude, s.hard_deck_agl):
                self.avoiding = True
                self.priority = 1.0
                emergency_pitch = inverse_lerp(s.hard_deck_agl, s.hard_deck_agl * 0.5, agl)
                inputs.pitch = lerp(inputs.pitch, emergency_pitch, dt * Config.GROUND_BLEND_RATE)
                inputs.throttle = 1.0

        # === FORWARD LOOK-AHEAD ===
        look = self.lookahead(entity.speed)
        self.lookahead_distance = look
        origin = entity.position + entity.forward * Config.LOOKAHEAD_ORIGIN_OFFSET
        hit = self.terrain.cast(origin, entity.forward, look, mask)
        if hit is not None:
            self.avoiding = True
            self.last_hit = hit
            hit_priority = inverse_lerp(look, look * 0.3, hit.distance)
            # A distant hit never weakens a hard-deck response on the same tick
            self.priority = max(self.priority, hit_priority)

            climb = s.climb_cmd * hit_priority
            if emergency_pitch is not None:
                climb = max(climb, emergency_pitch)
            inputs.pitch = lerp(inputs.pitch, climb, dt * Config.CLIMB_BLEND_RATE)
            inputs.throttle = max(inputs.throttle, Config.THROTTLE_AVOID_MIN)

            # Sidestep toward the side the surface faces. Positive roll banks right,
            # so a normal pointing along our right wing means roll right, away from it.
            side = float(np.dot(entity.right, hit.normal))
            desired_roll = s.sidestep_cmd if side > 0.0 else -s.sidestep_cmd
            desired_roll *= hit_priority
            inputs.roll = lerp(inputs.roll, desired_roll, dt * Config.SIDESTEP_BLEND_RATE)

        return self.avoiding
