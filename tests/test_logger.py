import csv
import os
import tempfile
import unittest

import numpy as np

from aircombat_bot.core import AirCombatCore
from aircombat_bot.entity import Faction
from aircombat_bot.terrain import FlatGround, TerrainWorld
from aircombat_bot.utils.logger import FlightRecorder


class TestFlightRecorder(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.log_dir = os.path.join(self.tmp.name, "records")
        self.core = AirCombatCore(terrain=TerrainWorld(FlatGround(0.0)))
        self.pilot = self.core.spawn_bot(0.0, 0.0, 3000.0, 0.0, Faction.BLUE, rng=np.random.default_rng(0))

    def tearDown(self):
        self.tmp.cleanup()

    def test_creates_log_dir(self):
        FlightRecorder(self.log_dir)
        self.assertTrue(os.path.isdir(self.log_dir))

    def test_nothing_buffered_writes_nothing(self):
        self.assertIsNone(FlightRecorder(self.log_dir).save_run(0))

    def test_save_run_writes_csv(self):
        recorder = FlightRecorder(self.log_dir)
        for step in range(3):
            self.core.step()
            recorder.log_step(7, step, self.core.time, self.pilot)

        filename = recorder.save_run(7)

        with open(filename, newline='') as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows[0], recorder.headers)
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[1][:2], ["7", "0"])
        self.assertEqual(rows[1][recorder.headers.index("state")], "patrol")
        self.assertEqual(recorder.current_run_data, [])

    def test_telemetry_covers_every_column(self):
        recorder = FlightRecorder(self.log_dir)
        telemetry = self.pilot.telemetry()
        for column in recorder.headers[3:]:
            self.assertIn(column, telemetry)


if __name__ == '__main__':
    unittest.main()
