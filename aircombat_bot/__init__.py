from aircombat_bot.behavior import BotState, EngagementPolicy
from aircombat_bot.bot import BotPilot
from aircombat_bot.core import AirCombatCore
from aircombat_bot.entity import Entity, Faction, Kind, is_hostile
from aircombat_bot.settings import BotConfig
from aircombat_bot.terrain import BoxObstacle, FlatGround, Heightfield, Layer, RayHit, TerrainWorld

__version__ = "0.1.0"
