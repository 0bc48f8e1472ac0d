import dataclasses
import logging

import numpy as np

from aircombat_bot.behavior import BehaviorStateMachine, BotState
from aircombat_bot.boundary import BoundaryEnforcer
from aircombat_bot.controls import ControlInputs, steer
from aircombat_bot.dynamics import FlightDynamics
from aircombat_bot.navigation import NavigationPlanner, WaypointSet
from aircombat_bot.settings import BotConfig
from aircombat_bot.speed import MachController
from aircombat_bot.targeting import TargetSelector
from aircombat_bot.terrain_avoidance import TerrainAvoidance
from config import Config

logger = logging.getLogger(__name__)

TIMER_EPSILON = 1e-9


class BotPilot:
    """
    Scripted pilot for one non-player combat aircraft.

    Three periodic tasks share this instance:
    - detection (every detection_interval): re-scan for the best hostile target
    - decision (every decision_interval): derive Patrol/Engage/Evade and a new aim point
    - physics (every update call): Mach control, terrain avoidance, steering, flight model

    `update(dt)` is the driver. Detection runs before decision and decision before
    physics, so the physics step always sees a completed decision.

    The pilot only reads other entities from the directory; it mutates nothing
    but its own entity.
    """
    def __init__(self, entity, settings=None, directory=None, terrain=None, rng=None):
        self.entity = entity
        self.name = entity.name
        # Private copy: validate() may repair fields
        self.settings = dataclasses.replace(settings) if settings is not None else BotConfig()
        self.settings.validate(self.name)
        self.directory = directory
        self.rng = rng or np.random.default_rng()

        s = self.settings
        self.selector = TargetSelector(s.detection_range, name=self.name)
        self.behavior = BehaviorStateMachine(s.policy, s.engagement_distance_min,
                                             s.cruise_speed, s.combat_speed, name=self.name)
        waypoints = WaypointSet.generate(s.patrol_center, s.patrol_size, s.patrol_alt_min,
                                         s.patrol_alt_max, s.waypoint_count,
                                         random_order=s.random_waypoints, rng=self.rng)
        self.planner = NavigationPlanner(s, waypoints, rng=self.rng, name=self.name)
        self.mach = MachController(s)
        self.avoidance = TerrainAvoidance(s, terrain, name=self.name)
        self.dynamics = FlightDynamics(s)
        self.boundary = BoundaryEnforcer.from_settings(s)
        self.inputs = ControlInputs()

        self.time = 0.0
        self.active = True
        self.events = []
        self._detection_timer = 0.0
        self._decision_timer = 0.0
        self._status_timer = 0.0

        self._initialize()

    def _initialize(self):
        e = self.entity
        e.velocity = e.forward * (self.settings.stall_speed * 1.2)
        self.planner.reset(e)

    # === PUBLIC ACCESSORS ===
    def has_target(self):
        return self.selector.has_target()

    def current_target(self):
        return self.selector.target

    @property
    def state(self):
        return self.behavior.state

    @property
    def nav_target(self):
        return self.planner.nav_target

    @property
    def throttle(self):
        return self.dynamics.throttle

    @property
    def waypoints(self):
        return self.planner.waypoints

    def force_state(self, state):
        """Explicit hook into states the decision table never produces (Return)."""
        previous = self.behavior.force(state)
        if previous is not state:
            self.events.append({"type": "state_change", "uid": self.entity.uid,
                                "from": previous.value, "to": state.value})

    def shutdown(self):
        """Stop all periodic tasks. Called when the entity leaves the simulation."""
        if self.active:
            logger.info("%s: Shut down", self.name)
        self.active = False
        self.selector.clear()

    # === DRIVER ===
    def update(self, dt):
        if not self.active:
            return
        s = self.settings
        self.time += dt

        self._detection_timer += dt
        if self._detection_timer + TIMER_EPSILON >= s.detection_interval:
            self._detection_timer = max(0.0, self._detection_timer - s.detection_interval)
            self.detection_tick()

        self._decision_timer += dt
        if self._decision_timer + TIMER_EPSILON >= s.decision_interval:
            self._decision_timer = max(0.0, self._decision_timer - s.decision_interval)
            self.decision_tick()

        self.physics_step(dt)
        self._log_status(dt)

    def detection_tick(self):
        event = self.selector.detect(self.entity, self.directory)
        if event is not None:
            self.events.append(event)

    def decision_tick(self):
        """Re-derive state, speed target and aim point together."""
        self.selector.validate()
        target = self.selector.target
        distance = None
        if target is not None:
            distance = float(np.linalg.norm(target.position - self.entity.position))

        previous = self.behavior.update(distance)
        if previous is not None:
            self.events.append({"type": "state_change", "uid": self.entity.uid,
                                "from": previous.value, "to": self.behavior.state.value})
        self.planner.plan(self.behavior.state, self.entity, target, self.time)

    def physics_step(self, dt):
        e = self.entity
        s = self.settings

        # A target destroyed since the last decision is dropped before use
        if self.selector.validate():
            self.events.append({"type": "target_lost", "owner": e.uid, "target": None})
            self.decision_tick()

        if self.behavior.state is BotState.PATROL:
            self.planner.track_waypoint(e.position)

        self.inputs.throttle = self.mach.update(self.behavior.state, e.velocity, e.forward, dt)
        self.avoidance.apply(e, self.inputs, dt)
        if not self.avoidance.overrides_steering:
            steer(self.inputs, e, self.planner.nav_target, s, dt)

        self.dynamics.update_throttle(self.inputs.throttle, dt)
        self.dynamics.step(e, self.inputs, dt)
        self.boundary.enforce(e)

    # === DIAGNOSTICS ===
    def status_line(self):
        e = self.entity
        target = self.selector.target
        if target is not None:
            dist = np.linalg.norm(target.position - e.position)
            target_status = f"{target.name} ({dist:.0f}m)"
            if self.selector.last_candidate is not None:
                target_status += f" score {self.selector.last_candidate.score:.1f}"
        else:
            target_status = "No Target"
        if self.avoidance.avoiding:
            terrain_status = f"AVOIDING (Priority: {self.avoidance.priority:.2f})"
        else:
            terrain_status = "Clear"
        return (f"{self.name} | State: {self.state.name} | Speed: {e.forward_speed:.0f}"
                f" (goal {self.behavior.speed_target:.0f}, ref {self.mach.reference_speed:.0f}) | "
                f"Mach: {self.mach.mach:.2f} | Alt: {e.altitude:.0f} | Throttle: {self.throttle:.0f} | "
                f"Target: {target_status} | Terrain: {terrain_status} "
                f"(lookahead {self.avoidance.lookahead_distance:.0f}m)")

    def telemetry(self):
        e = self.entity
        target = self.selector.target
        candidate = self.selector.last_candidate
        return {
            "uid": e.uid,
            "team": e.team.value,
            "state": self.state.value,
            "x": float(e.position[0]),
            "y": float(e.position[1]),
            "alt": e.altitude,
            "heading": e.heading,
            "speed": e.speed,
            "speed_target": self.behavior.speed_target,
            "mach": self.mach.mach,
            "ref_speed": self.mach.reference_speed,
            "throttle": self.throttle,
            "pitch_input": self.inputs.pitch,
            "roll_input": self.inputs.roll,
            "throttle_input": self.inputs.throttle,
            "bank": self.dynamics.bank_angle,
            "stalling": int(self.dynamics.stalling),
            "avoiding": int(self.avoidance.avoiding),
            "priority": self.avoidance.priority,
            "lookahead": self.avoidance.lookahead_distance,
            "target": target.uid if target is not None else -1,
            "target_score": candidate.score if candidate is not None else -1.0,
        }

    def _log_status(self, dt):
        if not self.settings.show_debug_info:
            return
        self._status_timer += dt
        if self._status_timer >= Config.STATUS_LOG_INTERVAL:
            self._status_timer = 0.0
            logger.debug(self.status_line())
