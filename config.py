class Config:
    # --- Simulation ---
    # Environment step and the fixed physics sub-step used by AirCombatCore.step()
    DT = 0.2
    PHYSICS_SUBSTEPS = 10        # Run physics 10x per environment step (50Hz)
    PHYSICS_DT = 0.02            # Fixed physics timestep in seconds

    # Frame: x = East, y = North, z = Up (meters). Heading 0 = North, 90 = East.
    GRAVITY = 9.81
    LINEAR_DAMPING = 0.1         # Fraction of velocity lost per second
    GROUND_PROBE_DISTANCE = 100000.0

    # --- Detection ---
    DETECTION_RANGE = 3500.0
    DETECTION_INTERVAL = 0.5
    TARGET_ANGLE_WEIGHT = 2.0    # Prioritize targets we're already pointing at
    TARGET_DISTANCE_WEIGHT = 0.001

    # --- Decision ---
    DECISION_INTERVAL = 0.5
    SKILL_LEVEL = 0.7

    # --- Patrol ---
    PATROL_CENTER = (0.0, 0.0, 0.0)
    PATROL_SIZE = (5000.0, 5000.0)
    PATROL_ALT_MIN = 500.0
    PATROL_ALT_MAX = 2000.0
    WAYPOINT_COUNT = 5
    RANDOM_WAYPOINTS = False
    WAYPOINT_REACHED_DISTANCE = 100.0

    # --- Engagement ---
    ENGAGEMENT_DISTANCE_MIN = 200.0
    ENGAGEMENT_DISTANCE_MAX = 1500.0
    ALTITUDE_ADVANTAGE = 200.0
    LEAD_PREDICTION_TIME = 1.5
    AGGRESSIVE_BLEND = 0.7       # Multiplied by skill level
    DEFENSIVE_ALTITUDE_FACTOR = 1.5
    ESCORT_LATERAL_FACTOR = 0.7
    ESCORT_ALTITUDE_OFFSET = 50.0

    # --- Evasion ---
    EVADE_DISTANCE = 500.0
    JINK_PERIOD = 4.0
    EVADE_JITTER = (-200.0, 400.0)

    # --- Throttle ---
    MAX_THROTTLE = 200.0         # Engine throttle is a forward acceleration (m/s^2)
    THROTTLE_ADJUST_RATE = 50.0
    THROTTLE_INPUT_THRESHOLD = 0.1
    CRUISE_SPEED = 930.0
    COMBAT_SPEED = 1200.0
    DEFENSIVE_SPEED_FACTOR = 0.9

    # --- Speed & Stall ---
    STALL_SPEED = 235.0
    STALL_DESCENT_RATE = 5.0
    MAX_SPEED = 2125.0
    BRAKE_DECELERATION = 75.0
    BRAKE_INPUT = -0.5

    # --- Flight Controls ---
    PITCH_SPEED = 80.0           # deg/s
    ROLL_SPEED = 110.0           # deg/s
    TURN_FORCE = 25.0            # deg/s of yaw at full bank strength
    LOOP_LIFT = 20.0
    PITCH_UP_BLEED = 5.0
    PITCH_DOWN_GAIN = 3.0
    TURN_PENALTY_FACTOR = 0.05
    TURN_LATERAL_THRUST = 2.0
    BANK_TURN_MIN = 15.0
    BANK_TURN_MAX = 165.0
    LEVEL_ALIGN_RATE = 2.0

    # --- Input Smoothing ---
    INPUT_SMOOTH_TIME = 0.15
    INPUT_DEAD_ZONE = 0.05       # Steering output snaps to zero below this
    CONTROL_DEAD_ZONE = 0.01     # Integrator ignores pitch/roll below this
    STEER_PITCH_RANGE_DEG = 45.0
    STEER_ROLL_RANGE_DEG = 90.0
    STALL_RECOVERY_MARGIN = 1.1
    STALL_RECOVERY_PITCH = -0.3

    # --- Mach Control ---
    SPEED_OF_SOUND = 343.0
    MACH_MIN = 0.7
    MACH_MAX = 1.1
    MACH_CRUISE = 0.9
    MACH_COMBAT = 1.0
    MACH_P = 100.0
    MACH_I = 5.0
    MACH_D = 20.0
    MACH_INTEGRAL_MAX = 0.5      # Anti-windup
    MACH_COMMAND_SCALE = 500.0
    MACH_BAND_MARGIN = 0.05
    MIN_CONTROL_DT = 0.01

    # --- Terrain Avoidance ---
    TERRAIN_MASK = 3             # Layer.TERRAIN | Layer.OBSTACLE
    MIN_ALTITUDE = 300.0
    TERRAIN_CHECK_DISTANCE = 1500.0
    HARD_DECK_AGL = 150.0
    LOOKAHEAD_TIME = 3.0
    LOOKAHEAD_TIME_MAX = 6.0
    LOOKAHEAD_MIN_DISTANCE = 500.0
    LOOKAHEAD_ORIGIN_OFFSET = 5.0
    CLIMB_CMD = 0.85
    SIDESTEP_CMD = 0.8
    THROTTLE_AVOID_MIN = 0.8
    GROUND_BLEND_RATE = 5.0
    CLIMB_BLEND_RATE = 4.0
    SIDESTEP_BLEND_RATE = 3.0
    OVERRIDE_PRIORITY = 0.5

    # --- Boundary ---
    ALTITUDE_FLOOR = 1400.0
    BOUNDARY_EDGE_SPEED = 10.0

    # --- Logging ---
    STATUS_LOG_INTERVAL = 5.0
    LOG_DIR = "logs"
