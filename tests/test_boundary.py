import unittest

import numpy as np

from aircombat_bot.boundary import BoundaryEnforcer
from aircombat_bot.entity import Entity, Faction
from aircombat_bot.settings import BotConfig
from aircombat_bot.utils.map_limits import BoundingVolume

CORNERS = [(0.0, 0.0, 500.0), (1000.0, 0.0, 500.0), (1000.0, 1000.0, 1500.0), (0.0, 1000.0, 1500.0)]


class TestBoundingVolume(unittest.TestCase):
    def test_from_corners(self):
        volume = BoundingVolume.from_corners(CORNERS)
        np.testing.assert_allclose(volume.lower, [0.0, 0.0, 500.0])
        np.testing.assert_allclose(volume.upper, [1000.0, 1000.0, 1500.0])

    def test_absolute_position(self):
        volume = BoundingVolume(-500.0, 500.0, 0.0, 2000.0, 0.0, 1000.0)
        self.assertEqual(volume.absolute_position(0.5, 0.25), (0.0, 500.0))

    def test_clamp_reports_edge_axes(self):
        volume = BoundingVolume.from_corners(CORNERS)
        clipped, at_edge = volume.clamp(np.array([1200.0, 500.0, 400.0]))
        np.testing.assert_allclose(clipped, [1000.0, 500.0, 500.0])
        self.assertEqual(at_edge.tolist(), [True, False, True])


class TestBoundaryEnforcer(unittest.TestCase):
    def create_entity(self, x, y, alt, velocity):
        e = Entity.at_heading(1, Faction.BLUE, x, y, alt, 90.0, 0.0)
        e.velocity = np.array(velocity, dtype=float)
        return e

    def test_clamps_to_edge_and_slows_outward_axis(self):
        enforcer = BoundaryEnforcer(BoundingVolume.from_corners(CORNERS), altitude_floor=0.0)
        entity = self.create_entity(1050.0, 500.0, 1000.0, (300.0, 40.0, -20.0))

        self.assertTrue(enforcer.enforce(entity))

        np.testing.assert_allclose(entity.position, [1000.0, 500.0, 1000.0])
        self.assertLessEqual(abs(entity.velocity[0]), 10.0)
        # Axes not touching an edge keep their velocity
        self.assertEqual(entity.velocity[1], 40.0)
        self.assertEqual(entity.velocity[2], -20.0)

    def test_inside_volume_untouched(self):
        enforcer = BoundaryEnforcer(BoundingVolume.from_corners(CORNERS), altitude_floor=0.0)
        entity = self.create_entity(500.0, 500.0, 1000.0, (300.0, 0.0, 0.0))

        self.assertFalse(enforcer.enforce(entity))
        self.assertEqual(entity.velocity[0], 300.0)

    def test_altitude_floor_without_volume(self):
        enforcer = BoundaryEnforcer(None, altitude_floor=1400.0)
        entity = self.create_entity(0.0, 0.0, 1000.0, (200.0, 0.0, -50.0))

        self.assertTrue(enforcer.enforce(entity))
        self.assertEqual(entity.altitude, 1400.0)
        self.assertEqual(entity.velocity[2], 0.0)
        self.assertEqual(entity.velocity[0], 200.0)

    def test_floor_wins_over_low_volume_top(self):
        enforcer = BoundaryEnforcer(BoundingVolume.from_corners(CORNERS), altitude_floor=1600.0)
        entity = self.create_entity(500.0, 500.0, 1550.0, (0.0, 0.0, 30.0))

        self.assertTrue(enforcer.enforce(entity))
        self.assertEqual(entity.altitude, 1600.0)

    def test_low_volume_top_is_reported(self):
        settings = BotConfig(bounding_corners=CORNERS, altitude_floor=1600.0)
        with self.assertLogs('aircombat_bot.settings', level='WARNING'):
            problems = settings.validate()
        self.assertEqual(len(problems), 1)
        self.assertIsNotNone(settings.bounding_corners)

    def test_from_settings(self):
        enforcer = BoundaryEnforcer.from_settings(BotConfig(bounding_corners=CORNERS, altitude_floor=0.0))
        np.testing.assert_allclose(enforcer.volume.upper, [1000.0, 1000.0, 1500.0])

        enforcer = BoundaryEnforcer.from_settings(BotConfig())
        self.assertIsNone(enforcer.volume)
        self.assertEqual(enforcer.altitude_floor, 1400.0)


if __name__ == '__main__':
    unittest.main()
