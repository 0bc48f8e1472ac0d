import numpy as np

from aircombat_bot.behavior import BotState
from aircombat_bot.utils.vectors import clamp
from config import Config


class MachController:
    """
    PID loop on Mach number producing a throttle input in [-1, 1].

    Inside the [mach_min, mach_max] band (plus a small margin) the command is
    smooth; outside it the output saturates to full power or full brake.

    `reference_speed` is the desired Mach expressed in m/s. It is reported in
    telemetry only; stall recovery keys off the stall speed directly.
    """

    def __init__(self, settings):
        self.settings = settings
        self.integral = 0.0
        self.last_error = 0.0
        self.mach = 0.0
        self.desired = settings.mach_cruise
        self.reference_speed = settings.cruise_speed
        self.command = 0.0

    @staticmethod
    def mach_number(velocity, forward):
        forward_speed = float(np.dot(velocity, forward))
        return max(0.0, forward_speed) / max(1e-2, Config.SPEED_OF_SOUND)

    def desired_mach(self, state):
        s = self.settings
        desired = s.mach_combat if state in (BotState.ENGAGE, BotState.EVADE) else s.mach_cruise
        return clamp(desired, s.mach_min, s.mach_max)

    def update(self, state, velocity, forward, dt):
        s = self.settings
        desired = self.desired_mach(state)
        mach = self.mach_number(velocity, forward)
        err = desired - mach

        # Integral with anti-windup
        self.integral = clamp(self.integral + err * dt, -s.mach_integral_max, s.mach_integral_max)

        d_err = (err - self.last_error) / max(dt, Config.MIN_CONTROL_DT)
        self.last_error = err

        accel_cmd = s.mach_p * err + s.mach_i * self.integral + s.mach_d * d_err

        self.mach = mach
        self.desired = desired
        self.command = accel_cmd
        self.reference_speed = clamp(desired * Config.SPEED_OF_SOUND, s.stall_speed * 1.2, s.max_speed)

        # Hard limits outside band, smooth control inside
        if mach < s.mach_min - Config.MACH_BAND_MARGIN:
            return 1.0
        if mach > s.mach_max + Config.MACH_BAND_MARGIN:
            return -1.0
        return clamp(accel_cmd / Config.MACH_COMMAND_SCALE, -1.0, 1.0)

    def reset(self):
        self.integral = 0.0
        self.last_error = 0.0
