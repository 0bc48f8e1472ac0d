import math
from dataclasses import dataclass

import numpy as np

from aircombat_bot.utils.vectors import clamp, smooth_damp
from config import Config


@dataclass
class ControlInputs:
    """Stick and throttle commands in [-1, 1]. Positive pitch is nose up, positive roll banks right."""
    pitch: float = 0.0
    roll: float = 0.0
    throttle: float = 0.0

    # smooth_damp velocities
    pitch_velocity: float = 0.0
    roll_velocity: float = 0.0


def desired_stick(entity, nav_target, skill_level):
    """
    Raw pitch/roll demand toward nav_target, scaled by skill.
    Pitch saturates at 45° of elevation error, roll at 90° of azimuth error.
    """
    to_target = nav_target - entity.position
    local_fwd = float(np.dot(to_target, entity.forward))
    local_right = float(np.dot(to_target, entity.right))
    local_up = float(np.dot(to_target, entity.up))

    pitch_angle = math.degrees(math.atan2(local_up, local_fwd))
    roll_angle = math.degrees(math.atan2(local_right, local_fwd))

    pitch = clamp(pitch_angle / Config.STEER_PITCH_RANGE_DEG, -1.0, 1.0)
    roll = clamp(roll_angle / Config.STEER_ROLL_RANGE_DEG, -1.0, 1.0)

    skill_scale = 0.5 + skill_level * 0.5
    return pitch * skill_scale, roll * skill_scale


def steer(inputs, entity, nav_target, settings, dt):
    """Smooth stick inputs toward the aim point; stall recovery overrides."""
    desired_pitch, desired_roll = desired_stick(entity, nav_target, settings.skill_level)

    inputs.pitch, inputs.pitch_velocity = smooth_damp(
        inputs.pitch, desired_pitch, inputs.pitch_velocity, settings.input_smooth_time, dt)
    inputs.roll, inputs.roll_velocity = smooth_damp(
        inputs.roll, desired_roll, inputs.roll_velocity, settings.input_smooth_time, dt)

    if abs(inputs.pitch) < settings.input_dead_zone:
        inputs.pitch = 0.0
    if abs(inputs.roll) < settings.input_dead_zone:
        inputs.roll = 0.0

    # Emergency stall recovery: nose down, full power
    if entity.forward_speed < settings.stall_speed * Config.STALL_RECOVERY_MARGIN:
        inputs.pitch = min(inputs.pitch, Config.STALL_RECOVERY_PITCH)
        inputs.throttle = 1.0
    return inputs
