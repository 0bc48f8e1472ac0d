import numpy as np

from aircombat_bot.utils.vectors import (
    WORLD_UP, clamp, clamp01, inverse_lerp, lerp, normalize, project, rotate, signed_angle_deg,
)
from config import Config


class FlightDynamics:
    """
    Kinematic flight model for one bot aircraft.

    Converts the engine throttle and stick inputs into orientation and velocity
    changes every physics tick, in this order: thrust and brake, stall, speed
    clamp, pitch, roll with bank-to-turn coupling, then gravity, damping and
    position integration.
    """

    def __init__(self, settings):
        self.settings = settings
        # Engine throttle is a forward acceleration in [0, max_throttle]
        self.throttle = clamp(settings.cruise_speed * 0.5, 0.0, settings.max_throttle)
        self.stalling = False
        self.bank_angle = 0.0

    def update_throttle(self, throttle_input, dt):
        """Rate-limited engine response to the throttle input."""
        s = self.settings
        desired = self.throttle
        if throttle_input > Config.THROTTLE_INPUT_THRESHOLD:
            desired += s.throttle_adjust_rate * dt
        elif throttle_input < -Config.THROTTLE_INPUT_THRESHOLD:
            desired -= s.throttle_adjust_rate * dt
        self.throttle = clamp(desired, 0.0, s.max_throttle)
        return self.throttle

    def step(self, entity, inputs, dt):
        self.apply_thrust(entity, inputs.throttle, dt)
        self.apply_stall(entity, dt)
        self.enforce_max_speed(entity)
        if not self.stalling:
            self.apply_pitch(entity, inputs.pitch, dt)
        self.apply_roll(entity, inputs.roll, dt)
        self.integrate(entity, dt)

    # === 1. THRUST ===
    def apply_thrust(self, entity, throttle_input, dt):
        entity.velocity = entity.velocity + entity.forward * (self.throttle * dt)

        if throttle_input < Config.BRAKE_INPUT:
            vel = entity.velocity
            if float(np.dot(vel, vel)) > 1e-4:
                entity.velocity = vel - normalize(vel) * (Config.BRAKE_DECELERATION * dt)

    # === 2. STALL ===
    def apply_stall(self, entity, dt):
        s = self.settings
        self.stalling = entity.forward_speed <= s.stall_speed
        if not self.stalling:
            return

        # Mush toward a half-down attitude
        target_dir = normalize(lerp(entity.forward, -WORLD_UP, 0.5))
        axis = np.cross(entity.forward, target_dir)
        if np.linalg.norm(axis) > 1e-6:
            angle = np.degrees(np.arccos(clamp(float(np.dot(entity.forward, target_dir)), -1.0, 1.0)))
            step = angle * clamp01(dt * 0.5)
            entity.set_orientation(rotate(entity.forward, axis, step), rotate(entity.up, axis, step))
        elif entity.forward[2] > 0.0:
            # Nose vertical: the half-down target degenerates, so drop the nose over the belly
            step = 135.0 * clamp01(dt * 0.5)
            right = entity.right
            entity.set_orientation(rotate(entity.forward, right, -step), rotate(entity.up, right, -step))

        entity.velocity = entity.velocity + (-WORLD_UP + entity.forward) * (s.stall_descent_rate * dt)

    # === 3. SPEED LIMIT ===
    def enforce_max_speed(self, entity):
        mag = float(np.linalg.norm(entity.velocity))
        if mag > self.settings.max_speed:
            entity.velocity = entity.velocity / mag * self.settings.max_speed

    # === 4. PITCH ===
    def apply_pitch(self, entity, pitch_input, dt):
        s = self.settings
        if abs(pitch_input) <= Config.CONTROL_DEAD_ZONE:
            return

        forward_speed = entity.forward_speed
        speed_factor = clamp01(forward_speed / s.cruise_speed)
        pitch_rate = s.pitch_speed * (0.5 + speed_factor) * s.skill_level

        # Positive rotation about the right axis raises the nose
        angle = pitch_input * pitch_rate * dt
        right = entity.right
        entity.set_orientation(rotate(entity.forward, right, angle), rotate(entity.up, right, angle))

        lift = np.zeros(3)
        if pitch_input > 0:
            forward_speed -= Config.PITCH_UP_BLEED * dt
            lift = entity.up * (s.loop_lift * dt)
        else:
            forward_speed += Config.PITCH_DOWN_GAIN * dt

        forward_speed = max(forward_speed, s.stall_speed * 0.8)
        residual = entity.velocity - project(entity.velocity, entity.forward)
        entity.velocity = entity.forward * forward_speed + residual + lift

    # === 5. ROLL & TURN COUPLING ===
    def apply_roll(self, entity, roll_input, dt):
        s = self.settings
        if abs(roll_input) > Config.CONTROL_DEAD_ZONE:
            angle = roll_input * s.roll_speed * s.skill_level * dt
            entity.set_orientation(entity.forward, rotate(entity.up, entity.forward, angle))

        # Positive bank = right wing down
        bank = signed_angle_deg(WORLD_UP, entity.up, entity.forward)
        self.bank_angle = bank

        if s.bank_turn_min < abs(bank) < s.bank_turn_max:
            turn_strength = inverse_lerp(s.bank_turn_min, s.bank_turn_max, abs(bank))
            turn_dir = 1.0 if bank > 0 else -1.0

            # Yaw toward the low wing; a right turn is a negative rotation about world up
            yaw = -turn_dir * turn_strength * s.turn_force * dt
            entity.set_orientation(rotate(entity.forward, WORLD_UP, yaw), rotate(entity.up, WORLD_UP, yaw))

            entity.velocity = entity.velocity + entity.right * (
                turn_dir * turn_strength * Config.TURN_LATERAL_THRUST * dt)

            penalty = turn_strength * s.turn_penalty_factor
            entity.velocity = entity.velocity * (1.0 - penalty * dt)
        else:
            forward_speed = entity.forward_speed
            target_velocity = entity.forward * forward_speed
            entity.velocity = lerp(entity.velocity, target_velocity, dt * Config.LEVEL_ALIGN_RATE)

    # === 6. INTEGRATION ===
    def integrate(self, entity, dt):
        entity.velocity = entity.velocity - WORLD_UP * (Config.GRAVITY * dt)
        entity.velocity = entity.velocity * max(0.0, 1.0 - Config.LINEAR_DAMPING * dt)
        self.enforce_max_speed(entity)
        entity.position = entity.position + entity.velocity * dt
