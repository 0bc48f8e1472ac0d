import unittest

import numpy as np

from aircombat_bot.behavior import BotState, EngagementPolicy
from aircombat_bot.entity import Entity, Faction
from aircombat_bot.navigation import NavigationPlanner, WaypointSet
from aircombat_bot.settings import BotConfig


class TestWaypointSet(unittest.TestCase):
    def test_generated_inside_patrol_volume(self):
        rng = np.random.default_rng(7)
        center = (1000.0, -2000.0, 100.0)
        route = WaypointSet.generate(center, (4000.0, 2000.0), 500.0, 1500.0, 20, rng=rng)

        self.assertEqual(len(route), 20)
        for p in route.points:
            self.assertTrue(-1000.0 <= p[0] <= 3000.0)
            self.assertTrue(-3000.0 <= p[1] <= -1000.0)
            self.assertTrue(600.0 <= p[2] <= 1600.0)

    def test_sequential_advance_wraps(self):
        route = WaypointSet([(0, 0, 0), (1, 0, 0), (2, 0, 0)])
        visited = [route.advance()[0] for _ in range(4)]
        self.assertEqual(visited, [1.0, 2.0, 0.0, 1.0])

    def test_random_advance_keeps_cursor_valid(self):
        route = WaypointSet([(i, 0, 0) for i in range(4)], random_order=True, rng=np.random.default_rng(3))
        for _ in range(200):
            route.advance()
            self.assertTrue(0 <= route.index < 4)

    def test_empty_route(self):
        route = WaypointSet([])
        self.assertIsNone(route.current)
        self.assertIsNone(route.advance())


class TestPatrolNavigation(unittest.TestCase):
    def test_sequential_traversal_visits_all_waypoints_in_order(self):
        settings = BotConfig(waypoint_count=5, patrol_alt_min=500.0, patrol_alt_max=2000.0)
        route = WaypointSet.generate(settings.patrol_center, settings.patrol_size, settings.patrol_alt_min,
                                     settings.patrol_alt_max, settings.waypoint_count,
                                     rng=np.random.default_rng(11))
        planner = NavigationPlanner(settings, route)

        # Start below the patrol band and fly straight at the aim point at 250 m/s
        position = np.array([0.0, 0.0, 0.0])
        dt, speed = 0.2, 250.0
        visited = []
        for _ in range(5000):
            before = route.index
            aim = planner.track_waypoint(position)
            if route.index != before:
                visited.append(before)
                if len(visited) == len(route):
                    break
            to_aim = aim - position
            dist = np.linalg.norm(to_aim)
            position = aim.copy() if dist <= speed * dt else position + to_aim / dist * speed * dt

        self.assertEqual(visited, [0, 1, 2, 3, 4])


class TestEngagementNavigation(unittest.TestCase):
    def setUp(self):
        self.me = Entity.at_heading(1, Faction.BLUE, 0.0, 0.0, 2000.0, 0.0, 300.0)
        self.target = Entity.at_heading(2, Faction.RED, 0.0, 1000.0, 2000.0, 0.0, 200.0)

    def make_planner(self, policy, skill=1.0):
        settings = BotConfig(policy=policy, skill_level=skill)
        return NavigationPlanner(settings, WaypointSet([]), rng=np.random.default_rng(0)), settings

    def test_lead_prediction_scales_with_skill(self):
        planner, s = self.make_planner(EngagementPolicy.AGGRESSIVE, skill=0.5)
        predicted = planner.predicted_position(self.target)
        expected = self.target.position + self.target.velocity * (s.lead_prediction_time * 0.5)
        np.testing.assert_allclose(predicted, expected)

    def test_aggressive_aims_behind_and_above(self):
        self.target.velocity = np.zeros(3)
        planner, s = self.make_planner(EngagementPolicy.AGGRESSIVE)
        aim = planner.plan(BotState.ENGAGE, self.me, self.target, 0.0)

        ideal = (s.engagement_distance_min + s.engagement_distance_max) / 2.0
        offset = aim - self.target.position
        self.assertAlmostEqual(float(np.dot(offset, self.target.forward)), -ideal * 0.7, places=6)
        self.assertAlmostEqual(offset[2], s.altitude_advantage * 0.7, places=6)

    def test_defensive_holds_distance(self):
        planner, s = self.make_planner(EngagementPolicy.DEFENSIVE)
        aim = planner.plan(BotState.ENGAGE, self.me, self.target, 0.0)

        ideal = (s.engagement_distance_min + s.engagement_distance_max) / 2.0
        expected = self.target.position + np.array([0.0, -ideal, s.altitude_advantage * 1.5])
        np.testing.assert_allclose(aim, expected, atol=1e-6)

    def test_escort_flies_alongside(self):
        planner, s = self.make_planner(EngagementPolicy.ESCORT)
        aim = planner.plan(BotState.ENGAGE, self.me, self.target, 0.0)

        ideal = (s.engagement_distance_min + s.engagement_distance_max) / 2.0
        # Target heads north, so its right wing points east
        np.testing.assert_allclose(aim, [ideal * 0.7, 1000.0, 2050.0], atol=1e-6)

    def test_evasion_jinks_on_time_window(self):
        planner, _ = self.make_planner(EngagementPolicy.DEFENSIVE)
        first = planner.plan(BotState.EVADE, self.me, self.target, 1.0)
        second = planner.plan(BotState.EVADE, self.me, self.target, 3.0)

        # Away from the target is south; the lateral leg flips sides
        self.assertLess(first[1], 0.0)
        self.assertLess(second[1], 0.0)
        self.assertAlmostEqual(abs(first[0]), 500.0, places=6)
        self.assertAlmostEqual(first[0], -second[0], places=6)
        self.assertTrue(2000.0 - 200.0 <= first[2] <= 2000.0 + 400.0)

    def test_return_holds_aim_point(self):
        planner, _ = self.make_planner(EngagementPolicy.AGGRESSIVE)
        planner.reset(self.me)
        held = planner.nav_target.copy()
        np.testing.assert_allclose(planner.plan(BotState.RETURN, self.me, self.target, 0.0), held)


if __name__ == '__main__':
    unittest.main()
