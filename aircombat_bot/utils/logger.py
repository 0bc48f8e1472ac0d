import os
import csv
import time
import logging

logger = logging.getLogger(__name__)


class FlightRecorder:
    """
    Logs per-tick bot telemetry for post-analysis.
    """
    def __init__(self, log_dir="logs"):
        self.log_dir = log_dir
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        self.current_run_data = []
        self.headers = [
            "run", "step", "time",
            "uid", "team", "state", "x", "y", "alt", "heading", "speed", "speed_target",
            "mach", "ref_speed", "throttle", "pitch_input", "roll_input", "throttle_input",
            "bank", "stalling", "avoiding", "priority", "lookahead", "target", "target_score"
        ]

    def log_step(self, run, step, time_sec, pilot):
        """
        Buffer a single step of data for one pilot.
        """
        telemetry = pilot.telemetry()
        row = [run, step, round(time_sec, 4)] + [telemetry[h] for h in self.headers[3:]]
        self.current_run_data.append(row)

    def save_run(self, run_id):
        """
        Write buffered data to CSV. Returns the filename, or None if nothing was written.
        """
        if not self.current_run_data:
            return None

        filename = os.path.join(self.log_dir, f"flight_record_run{run_id}_{int(time.time())}.csv")

        try:
            with open(filename, 'w', newline='') as f:
                writer = csv.writer(f)
                writer.writerow(self.headers)
                writer.writerows(self.current_run_data)
        except OSError as e:
            logger.error("Failed to save flight record: %s", e)
            filename = None

        self.current_run_data = []
        return filename
