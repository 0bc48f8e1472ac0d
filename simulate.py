import argparse
import logging
import math

import numpy as np
from tqdm import tqdm

from aircombat_bot.behavior import EngagementPolicy
from aircombat_bot.core import AirCombatCore
from aircombat_bot.entity import Faction
from aircombat_bot.settings import BotConfig
from aircombat_bot.terrain import BoxObstacle, Heightfield, TerrainWorld
from aircombat_bot.utils.logger import FlightRecorder
from aircombat_bot.utils.map_limits import BoundingVolume
from config import Config


def build_arena(rng, extent, towers):
    ground = Heightfield.rolling_hills(extent=extent, amplitude=600.0, wavelength=4000.0, rng=rng)
    world = TerrainWorld(ground)
    for _ in range(towers):
        cx, cy = rng.uniform(-extent / 3.0, extent / 3.0, size=2)
        base = ground.height_at(cx, cy)
        world.add(BoxObstacle((cx - 60.0, cy - 60.0, base), (cx + 60.0, cy + 60.0, base + 1800.0)))
    return world


def run(args):
    rng = np.random.default_rng(args.seed)
    world = build_arena(rng, args.extent, args.towers)
    core = AirCombatCore(terrain=world)
    limits = BoundingVolume(-args.extent / 2.0, args.extent / 2.0, -args.extent / 2.0, args.extent / 2.0,
                            0.0, 6000.0)

    corners = None
    if args.boxed:
        half = args.extent / 2.0
        corners = [(-half, -half, Config.ALTITUDE_FLOOR), (half, -half, Config.ALTITUDE_FLOOR),
                   (half, half, 6000.0), (-half, half, 6000.0)]

    # === SPAWNING LOGIC ===
    # Teams start on opposite sides of the arena, noses toward each other
    for team, policy, y_rel, heading in ((Faction.BLUE, args.blue_policy, 0.3, 0.0),
                                         (Faction.RED, args.red_policy, 0.7, 180.0)):
        for i in range(args.bots):
            x_rel = (i + 1) / (args.bots + 1)
            x, y = limits.absolute_position(x_rel, y_rel)
            settings = BotConfig(policy=EngagementPolicy(policy), skill_level=args.skill,
                                 patrol_center=(x, y, 0.0), patrol_alt_min=2000.0, patrol_alt_max=3500.0,
                                 bounding_corners=corners, show_debug_info=args.verbose)
            core.spawn_bot(x, y, 2500.0, heading, team, settings=settings,
                           rng=np.random.default_rng(rng.integers(1 << 31)))

    recorder = FlightRecorder(args.log_dir)
    steps = int(math.ceil(args.duration / Config.DT))
    counts = {}

    for step in tqdm(range(steps), desc="Simulating"):
        core.step()
        for event in core.events:
            counts[event["type"]] = counts.get(event["type"], 0) + 1
        for pilot in core.pilots.values():
            recorder.log_step(args.seed, step, core.time, pilot)
        if not core.pilots:
            print("All aircraft lost. Stopping.")
            break

    filename = recorder.save_run(args.seed)

    print(f"\nSimulated {core.time:.1f}s with {len(core.pilots)} aircraft still flying")
    for name, count in sorted(counts.items()):
        print(f"  {name}: {count}")
    for pilot in core.pilots.values():
        print("  " + pilot.status_line())
    if filename:
        print(f"Flight record saved: {filename}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a bot-vs-bot dogfight over procedural terrain")
    parser.add_argument("--duration", type=float, default=120.0, help="Simulated seconds")
    parser.add_argument("--bots", type=int, default=2, help="Bots per team")
    parser.add_argument("--skill", type=float, default=Config.SKILL_LEVEL)
    parser.add_argument("--blue-policy", choices=[p.value for p in EngagementPolicy], default="aggressive")
    parser.add_argument("--red-policy", choices=[p.value for p in EngagementPolicy], default="defensive")
    parser.add_argument("--extent", type=float, default=12000.0, help="Arena width in meters")
    parser.add_argument("--towers", type=int, default=4, help="Number of box obstacles")
    parser.add_argument("--boxed", action="store_true", help="Enforce the arena as a bounding volume")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--log-dir", type=str, default=Config.LOG_DIR)
    parser.add_argument("--verbose", action="store_true", help="Periodic per-bot status lines")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(name)s] %(message)s")
    run(args)
