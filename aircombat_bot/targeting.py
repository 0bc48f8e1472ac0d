import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from aircombat_bot.entity import Entity, Kind, is_hostile
from aircombat_bot.utils.vectors import angle_deg
from config import Config

logger = logging.getLogger(__name__)


@dataclass
class TargetCandidate:
    entity: Entity
    distance: float
    angle_off: float     # Degrees between our nose and the line of sight
    score: float


def scan(candidates, position, forward, sensor_range, exclude=None,
         angle_weight=Config.TARGET_ANGLE_WEIGHT,
         distance_weight=Config.TARGET_DISTANCE_WEIGHT) -> Optional[TargetCandidate]:
    """
    Pick the candidate needing the least work to engage.

    score = angle_off * angle_weight + distance * distance_weight; lowest wins and
    ties go to the first candidate in scan order. Only range is filtered here,
    there is no field-of-view cone.
    """
    best = None
    for entity in candidates:
        if entity is exclude:
            continue
        if not entity.has_body or not entity.alive:
            continue

        to_target = entity.position - position
        distance = float(np.linalg.norm(to_target))
        if distance > sensor_range:
            continue

        angle_off = angle_deg(forward, to_target)
        score = angle_off * angle_weight + distance * distance_weight
        if best is None or score < best.score:
            best = TargetCandidate(entity, distance, angle_off, score)
    return best


class TargetSelector:
    """Holds the current target reference for one aircraft."""

    def __init__(self, sensor_range=Config.DETECTION_RANGE, name="bot"):
        self.sensor_range = sensor_range
        self.name = name
        self.target: Optional[Entity] = None
        self.last_candidate: Optional[TargetCandidate] = None

    def has_target(self):
        return self.target is not None

    def hostile_candidates(self, owner, directory):
        return [e for e in directory.candidates()
                if e is not owner and e.type is Kind.PLANE and is_hostile(owner.team, e.team)]

    def detect(self, owner, directory):
        """
        Re-scan the directory and replace or clear the target.

        Returns an event dict when the target changed, else None.
        """
        candidates = self.hostile_candidates(owner, directory) if directory is not None else []
        best = scan(candidates, owner.position, owner.forward, self.sensor_range, exclude=owner)
        self.last_candidate = best

        if best is None:
            if self.target is not None:
                logger.info("%s: Lost all targets", self.name)
                lost = self.target
                self.target = None
                return {"type": "target_lost", "owner": owner.uid, "target": lost.uid}
            return None

        if best.entity is not self.target:
            self.target = best.entity
            logger.info("%s: New target selected - %s (angle: %.1f°)",
                        self.name, best.entity.name, best.angle_off)
            return {"type": "target_acquired", "owner": owner.uid, "target": best.entity.uid}
        return None

    def validate(self):
        """Drop a reference to a destroyed or removed entity. True if one was dropped."""
        if self.target is not None and not (self.target.alive and self.target.has_body):
            logger.info("%s: Target %s no longer valid", self.name, self.target.name)
            self.target = None
            return True
        return False

    def clear(self):
        self.target = None
        self.last_candidate = None
