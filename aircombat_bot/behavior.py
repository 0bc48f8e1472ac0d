import enum
import logging

from config import Config

logger = logging.getLogger(__name__)


class BotState(enum.Enum):
    PATROL = "patrol"
    ENGAGE = "engage"
    EVADE = "evade"
    RETURN = "return"   # Only entered through an explicit force()


class EngagementPolicy(enum.Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    ESCORT = "escort"


def evaluate_state(has_target, distance, policy, min_engagement_range,
                   cruise_speed=Config.CRUISE_SPEED, combat_speed=Config.COMBAT_SPEED):
    """
    Pure transition table: (target presence, distance, policy) -> (state, speed target).
    """
    if not has_target:
        return BotState.PATROL, cruise_speed

    if policy is EngagementPolicy.AGGRESSIVE:
        return BotState.ENGAGE, combat_speed

    if policy is EngagementPolicy.DEFENSIVE:
        speed = combat_speed * Config.DEFENSIVE_SPEED_FACTOR
        if distance < min_engagement_range:
            return BotState.EVADE, speed
        return BotState.ENGAGE, speed

    # Escort flies alongside at cruise
    return BotState.ENGAGE, cruise_speed


class BehaviorStateMachine:
    def __init__(self, policy=EngagementPolicy.AGGRESSIVE,
                 min_engagement_range=Config.ENGAGEMENT_DISTANCE_MIN,
                 cruise_speed=Config.CRUISE_SPEED, combat_speed=Config.COMBAT_SPEED,
                 name="bot"):
        self.policy = policy
        self.min_engagement_range = min_engagement_range
        self.cruise_speed = cruise_speed
        self.combat_speed = combat_speed
        self.name = name
        self.state = BotState.PATROL
        self.speed_target = cruise_speed

    def update(self, target_distance):
        """
        Re-derive the state. `target_distance` is None when there is no target.
        Returns the previous state if it changed, else None.
        """
        previous = self.state
        self.state, self.speed_target = evaluate_state(
            target_distance is not None, target_distance, self.policy,
            self.min_engagement_range, self.cruise_speed, self.combat_speed)
        if previous is not self.state:
            logger.info("%s: State changed: %s -> %s", self.name, previous.name, self.state.name)
            return previous
        return None

    def force(self, state):
        """Hook for states the table never produces (Return). Lasts until the next update()."""
        previous = self.state
        self.state = state
        if previous is not state:
            logger.info("%s: State forced: %s -> %s", self.name, previous.name, state.name)
        return previous
