import logging

import numpy as np

from aircombat_bot.bot import BotPilot
from aircombat_bot.entity import Entity, Kind
from aircombat_bot.terrain import Layer
from config import Config

logger = logging.getLogger(__name__)


class AirCombatCore:
    """
    Simulation world hosting bot pilots.

    Acts as the entity directory the pilots scan for targets and as the
    ray-query collaborator for terrain avoidance. Pilots own their entity's
    state; entities without a pilot fly straight at constant velocity.
    """

    def __init__(self, terrain=None):
        # terrain: TerrainWorld (or anything with cast(..., mask) and ground_height)
        self.cfg = Config
        self.entities = {}               # UID -> Entity for all active entities
        self.pilots = {}                 # UID -> BotPilot for bot-controlled entities
        self.next_uid = 1
        self.events = []                 # Events that occurred this step
        self.time = 0.0
        self.terrain = terrain
        if terrain is None:
            logger.warning("No terrain configured: pilots will use minimum-altitude avoidance only")

    def spawn(self, x, y, alt, heading, speed, team, etype=Kind.PLANE, has_body=True, name=""):
        """
        Create and spawn a new entity.

        Args:
            x, y: East/North position in meters
            alt: Altitude in meters
            heading: Compass heading in degrees (0 = North)
            speed: Initial speed in m/s along the heading
            team: Faction
            etype: Kind of entity

        Returns:
            int: The unique ID assigned to the spawned entity
        """
        e = Entity.at_heading(self.next_uid, team, x, y, alt, heading, speed, etype=etype,
                              has_body=has_body, name=name)
        self.entities[e.uid] = e
        self.next_uid += 1
        return e.uid

    def attach_pilot(self, uid, settings=None, rng=None):
        pilot = BotPilot(self.entities[uid], settings=settings, directory=self,
                         terrain=self.terrain, rng=rng)
        self.pilots[uid] = pilot
        return pilot

    def spawn_bot(self, x, y, alt, heading, team, settings=None, rng=None, name=""):
        uid = self.spawn(x, y, alt, heading, 0.0, team, name=name)
        return self.attach_pilot(uid, settings=settings, rng=rng)

    # === COLLABORATOR INTERFACES ===
    def candidates(self):
        return list(self.entities.values())

    def cast(self, origin, direction, max_distance, mask=Layer.ALL):
        if self.terrain is None:
            return None
        return self.terrain.cast(origin, direction, max_distance, mask)

    def remove(self, uid, reason="removed"):
        """Tear down an entity: its pilot stops and other pilots drop it on their next tick."""
        ent = self.entities.pop(uid, None)
        if ent is None:
            return
        ent.alive = False
        pilot = self.pilots.pop(uid, None)
        if pilot is not None:
            pilot.shutdown()
        self.events.append({"type": reason, "victim": uid})

    # === STEPPING ===
    def step(self):
        """
        Advance simulation by one environment step (DT) using fixed physics sub-steps.
        """
        self.events = []
        dt = self.cfg.PHYSICS_DT

        for _ in range(self.cfg.PHYSICS_SUBSTEPS):
            for uid, ent in list(self.entities.items()):
                if uid not in self.entities:
                    continue
                pilot = self.pilots.get(uid)
                if pilot is not None:
                    pilot.update(dt)
                else:
                    ent.position = ent.position + ent.velocity * dt

            for pilot in self.pilots.values():
                if pilot.events:
                    self.events.extend(pilot.events)
                    pilot.events = []

            self._check_ground_collisions()

        self.time += self.cfg.DT

    def _check_ground_collisions(self):
        for uid, ent in list(self.entities.items()):
            ground = self.terrain.ground_height(ent.position[0], ent.position[1]) if self.terrain else 0.0
            if ent.position[2] <= ground:
                logger.info("%s crashed into terrain at %s", ent.name, np.round(ent.position, 1))
                self.remove(uid, reason="crash")
