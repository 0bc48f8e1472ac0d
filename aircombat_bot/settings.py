import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from aircombat_bot.behavior import EngagementPolicy
from aircombat_bot.terrain import Layer
from config import Config

logger = logging.getLogger(__name__)


@dataclass
class BotConfig:
    """
    Construction-time settings for one bot aircraft. Defaults come from Config.
    """
    # AI
    policy: EngagementPolicy = EngagementPolicy.AGGRESSIVE
    skill_level: float = Config.SKILL_LEVEL

    # Detection / decision
    detection_range: float = Config.DETECTION_RANGE
    detection_interval: float = Config.DETECTION_INTERVAL
    decision_interval: float = Config.DECISION_INTERVAL

    # Patrol
    patrol_center: Sequence[float] = Config.PATROL_CENTER
    patrol_size: Sequence[float] = Config.PATROL_SIZE
    patrol_alt_min: float = Config.PATROL_ALT_MIN
    patrol_alt_max: float = Config.PATROL_ALT_MAX
    waypoint_count: int = Config.WAYPOINT_COUNT
    random_waypoints: bool = Config.RANDOM_WAYPOINTS
    waypoint_reached_distance: float = Config.WAYPOINT_REACHED_DISTANCE

    # Engagement
    engagement_distance_min: float = Config.ENGAGEMENT_DISTANCE_MIN
    engagement_distance_max: float = Config.ENGAGEMENT_DISTANCE_MAX
    altitude_advantage: float = Config.ALTITUDE_ADVANTAGE
    lead_prediction_time: float = Config.LEAD_PREDICTION_TIME

    # Throttle & speed
    max_throttle: float = Config.MAX_THROTTLE
    throttle_adjust_rate: float = Config.THROTTLE_ADJUST_RATE
    cruise_speed: float = Config.CRUISE_SPEED
    combat_speed: float = Config.COMBAT_SPEED
    stall_speed: float = Config.STALL_SPEED
    stall_descent_rate: float = Config.STALL_DESCENT_RATE
    max_speed: float = Config.MAX_SPEED

    # Flight controls
    pitch_speed: float = Config.PITCH_SPEED
    roll_speed: float = Config.ROLL_SPEED
    turn_force: float = Config.TURN_FORCE
    loop_lift: float = Config.LOOP_LIFT
    turn_penalty_factor: float = Config.TURN_PENALTY_FACTOR
    bank_turn_min: float = Config.BANK_TURN_MIN
    bank_turn_max: float = Config.BANK_TURN_MAX
    input_smooth_time: float = Config.INPUT_SMOOTH_TIME
    input_dead_zone: float = Config.INPUT_DEAD_ZONE

    # Mach control
    mach_min: float = Config.MACH_MIN
    mach_max: float = Config.MACH_MAX
    mach_cruise: float = Config.MACH_CRUISE
    mach_combat: float = Config.MACH_COMBAT
    mach_p: float = Config.MACH_P
    mach_i: float = Config.MACH_I
    mach_d: float = Config.MACH_D
    mach_integral_max: float = Config.MACH_INTEGRAL_MAX

    # Terrain avoidance
    terrain_mask: Layer = Layer(Config.TERRAIN_MASK)
    min_altitude: float = Config.MIN_ALTITUDE
    terrain_check_distance: float = Config.TERRAIN_CHECK_DISTANCE
    hard_deck_agl: float = Config.HARD_DECK_AGL
    lookahead_time: float = Config.LOOKAHEAD_TIME
    lookahead_time_max: float = Config.LOOKAHEAD_TIME_MAX
    climb_cmd: float = Config.CLIMB_CMD
    sidestep_cmd: float = Config.SIDESTEP_CMD

    # Boundary
    bounding_corners: Optional[Sequence[Sequence[float]]] = None
    altitude_floor: float = Config.ALTITUDE_FLOOR

    # Debug
    show_debug_info: bool = False

    def validate(self, name="bot"):
        """Log and repair settings that would misbehave. Never raises."""
        problems = []
        if not 0.0 <= self.skill_level <= 1.0:
            problems.append(f"skill_level {self.skill_level} outside [0, 1], clamped")
            self.skill_level = min(max(self.skill_level, 0.0), 1.0)
        if self.engagement_distance_min > self.engagement_distance_max:
            problems.append("engagement distance band inverted, swapped")
            self.engagement_distance_min, self.engagement_distance_max = (
                self.engagement_distance_max, self.engagement_distance_min)
        if self.mach_min > self.mach_max:
            problems.append("mach band inverted, swapped")
            self.mach_min, self.mach_max = self.mach_max, self.mach_min
        if self.waypoint_count < 1:
            problems.append("waypoint_count < 1, patrol will hold its initial heading")
            self.waypoint_count = 0
        if self.patrol_alt_min > self.patrol_alt_max:
            problems.append("patrol altitude band inverted, swapped")
            self.patrol_alt_min, self.patrol_alt_max = self.patrol_alt_max, self.patrol_alt_min
        if self.bounding_corners is not None and len(self.bounding_corners) != 4:
            problems.append("bounding_corners needs exactly 4 points, boundary disabled")
            self.bounding_corners = None
        if self.bounding_corners is not None:
            top = max(float(c[2]) for c in self.bounding_corners)
            if top < self.altitude_floor:
                problems.append(f"bounding volume top {top:.0f} below altitude floor "
                                f"{self.altitude_floor:.0f}, floor takes precedence")
        for problem in problems:
            logger.warning("%s: %s", name, problem)
        return problems
