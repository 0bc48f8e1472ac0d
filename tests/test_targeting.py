import math
import unittest

from aircombat_bot.entity import Entity, Faction
from aircombat_bot.targeting import TargetSelector, scan
from config import Config


class StaticDirectory:
    def __init__(self, entities):
        self.entities = entities

    def candidates(self):
        return list(self.entities)


class TestTargetScoring(unittest.TestCase):
    def setUp(self):
        self.uid = 0
        self.owner = self.create_entity(0.0, 0.0, heading=0.0, team=Faction.BLUE)

    def create_entity(self, x, y, heading=180.0, speed=250.0, team=Faction.RED, alt=2000.0, **kwargs):
        self.uid += 1
        return Entity.at_heading(self.uid, team, x, y, alt, heading, speed, **kwargs)

    def at_bearing(self, bearing_deg, distance, **kwargs):
        b = math.radians(bearing_deg)
        return self.create_entity(distance * math.sin(b), distance * math.cos(b), **kwargs)

    def test_lowest_score_wins(self):
        # 30 deg off at 500m -> 60.5 ; 5 deg off at 3000m -> 13.0
        wide_close = self.at_bearing(30.0, 500.0)
        narrow_far = self.at_bearing(5.0, 3000.0)

        best = scan([wide_close, narrow_far], self.owner.position, self.owner.forward, 3500.0)

        self.assertIs(best.entity, narrow_far)
        self.assertAlmostEqual(best.angle_off, 5.0, places=4)
        self.assertAlmostEqual(best.score, 5.0 * 2.0 + 3000.0 * 0.001, places=4)

    def test_score_matches_argmin(self):
        candidates = [self.at_bearing(b, d) for b, d in [(40, 900), (12, 2500), (-15, 600), (90, 100)]]
        best = scan(candidates, self.owner.position, self.owner.forward, Config.DETECTION_RANGE)

        scores = [abs(b) * 2.0 + d * 0.001 for b, d in [(40, 900), (12, 2500), (-15, 600), (90, 100)]]
        expected = candidates[scores.index(min(scores))]
        self.assertIs(best.entity, expected)

    def test_tie_goes_to_first_in_scan_order(self):
        left = self.at_bearing(-20.0, 1000.0)
        right = self.at_bearing(20.0, 1000.0)

        best = scan([left, right], self.owner.position, self.owner.forward, 3500.0)
        self.assertIs(best.entity, left)

        best = scan([right, left], self.owner.position, self.owner.forward, 3500.0)
        self.assertIs(best.entity, right)

    def test_range_filter_only(self):
        behind = self.at_bearing(180.0, 1000.0)
        too_far = self.at_bearing(0.0, 3600.0)

        best = scan([too_far, behind], self.owner.position, self.owner.forward, 3500.0)

        # No field-of-view cone: a target dead astern is still selected
        self.assertIs(best.entity, behind)
        self.assertAlmostEqual(best.angle_off, 180.0, places=3)

    def test_excludes_self_and_bodiless(self):
        ghost = self.at_bearing(0.0, 500.0, has_body=False)
        best = scan([self.owner, ghost], self.owner.position, self.owner.forward, 3500.0, exclude=self.owner)
        self.assertIsNone(best)

    def test_empty_candidates(self):
        self.assertIsNone(scan([], self.owner.position, self.owner.forward, 3500.0))


class TestTargetSelector(unittest.TestCase):
    def setUp(self):
        self.owner = Entity.at_heading(1, Faction.BLUE, 0.0, 0.0, 2000.0, 0.0, 300.0)
        self.friend = Entity.at_heading(2, Faction.BLUE, 0.0, 300.0, 2000.0, 0.0, 300.0)
        self.enemy = Entity.at_heading(3, Faction.RED, 0.0, 2000.0, 2000.0, 180.0, 300.0)
        self.neutral = Entity.at_heading(4, Faction.NEUTRAL, 0.0, 100.0, 2000.0, 0.0, 300.0)
        self.directory = StaticDirectory([self.owner, self.friend, self.enemy, self.neutral])
        self.selector = TargetSelector(sensor_range=3500.0, name="test")

    def test_only_hostiles_are_considered(self):
        event = self.selector.detect(self.owner, self.directory)

        self.assertTrue(self.selector.has_target())
        self.assertIs(self.selector.target, self.enemy)
        self.assertEqual(event["type"], "target_acquired")

    def test_same_target_produces_no_event(self):
        self.selector.detect(self.owner, self.directory)
        self.assertIsNone(self.selector.detect(self.owner, self.directory))

    def test_cleared_when_target_leaves_range(self):
        self.selector.detect(self.owner, self.directory)
        self.enemy.position[1] = 10000.0

        event = self.selector.detect(self.owner, self.directory)

        self.assertFalse(self.selector.has_target())
        self.assertEqual(event["type"], "target_lost")

    def test_validate_drops_destroyed_target(self):
        self.selector.detect(self.owner, self.directory)
        self.enemy.alive = False

        self.assertTrue(self.selector.validate())
        self.assertIsNone(self.selector.target)
        self.assertFalse(self.selector.validate())


if __name__ == '__main__':
    unittest.main()
