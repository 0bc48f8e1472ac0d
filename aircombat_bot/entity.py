import enum
from dataclasses import dataclass, field

import numpy as np

from aircombat_bot.utils.vectors import heading_vector, heading_of, orthonormalize, WORLD_UP


class Faction(enum.Enum):
    BLUE = "blue"
    RED = "red"
    NEUTRAL = "neutral"


class Kind(enum.Enum):
    PLANE = "plane"
    MISSILE = "missile"
    GROUND = "ground"


def is_hostile(a, b):
    """Two factions are hostile when they differ and neither is neutral."""
    if a is Faction.NEUTRAL or b is Faction.NEUTRAL:
        return False
    return a is not b


@dataclass(eq=False)
class Entity:
    """
    Kinematic state of one flight entity in the simulation.
    Orientation is a forward/up basis; right is derived.
    """
    # Core Identification
    uid: int
    team: Faction
    type: Kind = Kind.PLANE
    name: str = ""

    # Kinematics (x = East, y = North, z = Up, meters and m/s)
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    forward: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    up: np.ndarray = field(default_factory=lambda: WORLD_UP.copy())

    has_body: bool = True    # False for markers the predictor can't read velocity from
    alive: bool = True

    def __post_init__(self):
        self.position = np.array(self.position, dtype=float)
        self.velocity = np.array(self.velocity, dtype=float)
        self.forward, self.up = orthonormalize(np.asarray(self.forward, dtype=float),
                                               np.asarray(self.up, dtype=float))
        if not self.name:
            self.name = f"{self.team.value}-{self.type.value}-{self.uid}"

    @classmethod
    def at_heading(cls, uid, team, x, y, alt, heading, speed, etype=Kind.PLANE, **kwargs):
        forward = heading_vector(heading)
        return cls(uid=uid, team=team, type=etype,
                   position=np.array([x, y, alt], dtype=float),
                   velocity=forward * speed, forward=forward, **kwargs)

    @property
    def right(self):
        return np.cross(self.forward, self.up)

    @property
    def altitude(self):
        return float(self.position[2])

    @property
    def heading(self):
        return heading_of(self.forward)

    @property
    def speed(self):
        return float(np.linalg.norm(self.velocity))

    @property
    def forward_speed(self):
        return float(np.dot(self.velocity, self.forward))

    def set_orientation(self, forward, up):
        self.forward, self.up = orthonormalize(forward, up)
