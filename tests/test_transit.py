"""
Tests for transit estimation (pending queue, speeds, timeouts)
"""

import unittest

from vehicle_counter.core import (
    TransitEstimator,
    compute_max_wait_frames,
    compute_speed_kmh,
)
from vehicle_counter.models import VehicleClass


class TestSpeedMath(unittest.TestCase):
    """Test speed and timeout helpers."""

    def test_speed_over_one_second(self):
        """Test 6 m covered in 30 frames at 30 fps."""
        self.assertAlmostEqual(compute_speed_kmh(30, 30, 6.0), 21.6)

    def test_speed_over_half_second(self):
        """Test 6 m covered in 15 frames at 30 fps."""
        self.assertAlmostEqual(compute_speed_kmh(15, 30, 6.0), 43.2)

    def test_max_wait_frames(self):
        """Test the timeout is truncated to whole frames."""
        self.assertEqual(compute_max_wait_frames(30, 6.0), 60)
        self.assertEqual(compute_max_wait_frames(25, 6.0), 50)
        self.assertEqual(compute_max_wait_frames(29.97, 6.0), 59)


class TestTransitEstimator(unittest.TestCase):
    """Test the pending-transit queue."""

    def setUp(self):
        self.estimator = TransitEstimator(frames_per_second=30, line_distance_m=6.0)

    def idle(self, frames):
        for _ in range(frames):
            self.estimator.update(None, False)

    def test_arrival_counts_and_queues(self):
        """Test a counted vehicle is queued and counted."""
        update = self.estimator.update(VehicleClass.SMALL, False)

        self.assertEqual(update.arrival.sequence_id, 1)
        self.assertEqual(update.arrival.elapsed_frames, 1)
        self.assertEqual(self.estimator.aggregates[VehicleClass.SMALL].count, 1)
        self.assertEqual(self.estimator.total_counted, 1)
        self.assertEqual(len(self.estimator.pending), 1)

    def test_completion_speed(self):
        """Test completion after 15 elapsed frames gives 43.2 km/h."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.idle(13)
        update = self.estimator.update(None, True, video_time=14 / 30)

        self.assertEqual(update.completed.elapsed_frames, 15)
        self.assertAlmostEqual(update.completed.speed_kmh, 43.2)
        self.assertAlmostEqual(update.completed.video_time, 14 / 30)
        small = self.estimator.aggregates[VehicleClass.SMALL]
        self.assertEqual(small.samples, 1)
        self.assertAlmostEqual(small.average_speed, 43.2)
        self.assertEqual(len(self.estimator.pending), 0)

    def test_completion_is_fifo(self):
        """Test the oldest pending vehicle completes first."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.estimator.update(VehicleClass.LARGE, False)
        update = self.estimator.update(None, True)

        self.assertEqual(update.completed.sequence_id, 1)
        self.assertEqual(update.completed.vehicle_class, VehicleClass.SMALL)
        self.assertEqual(self.estimator.pending[0].sequence_id, 2)

    def test_completions_follow_counting_order(self):
        """Test three queued vehicles complete in the order they were counted."""
        arrivals = [VehicleClass.SMALL, VehicleClass.MEDIUM, VehicleClass.LARGE]
        for vehicle_class in arrivals:
            self.estimator.update(vehicle_class, False)

        completed = [self.estimator.update(None, True).completed for _ in arrivals]

        self.assertEqual([t.sequence_id for t in completed], [1, 2, 3])
        self.assertEqual([t.vehicle_class for t in completed], arrivals)
        self.assertEqual(len(self.estimator.pending), 0)

    def test_arrival_and_completion_same_frame(self):
        """Test an arrival is queued before the completion pops."""
        update = self.estimator.update(VehicleClass.MEDIUM, True)

        self.assertEqual(update.completed.sequence_id, 1)
        self.assertEqual(update.completed.elapsed_frames, 1)

    def test_underflow_ignored(self):
        """Test a speed trigger with nothing pending is not an error."""
        update = self.estimator.update(None, True)

        self.assertIsNone(update.completed)
        for aggregate in self.estimator.aggregates.values():
            self.assertEqual(aggregate.samples, 0)

    def test_average_speed(self):
        """Test the class average over two completions."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.idle(13)
        self.estimator.update(None, True)  # 15 frames, 43.2 km/h

        self.estimator.update(VehicleClass.SMALL, False)
        self.idle(28)
        self.estimator.update(None, True)  # 30 frames, 21.6 km/h

        small = self.estimator.aggregates[VehicleClass.SMALL]
        self.assertEqual(small.count, 2)
        self.assertEqual(small.samples, 2)
        self.assertAlmostEqual(small.average_speed, 32.4)

    def test_timeout_expires_and_uncounts(self):
        """Test a vehicle waiting past the timeout is dropped and uncounted."""
        self.estimator.update(VehicleClass.LARGE, False)
        self.idle(59)
        self.assertEqual(self.estimator.pending[0].elapsed_frames, 60)
        self.assertEqual(len(self.estimator.pending), 1)

        update = self.estimator.update(None, False)

        self.assertEqual([t.sequence_id for t in update.expired], [1])
        self.assertEqual(update.expired[0].elapsed_frames, 61)
        self.assertEqual(len(self.estimator.pending), 0)
        self.assertEqual(self.estimator.aggregates[VehicleClass.LARGE].count, 0)
        self.assertEqual(self.estimator.total_counted, 1)

    def test_completion_runs_before_sweep(self):
        """Test a trigger on the expiry frame still completes the transit."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.idle(59)
        update = self.estimator.update(None, True)

        self.assertEqual(update.completed.elapsed_frames, 61)
        self.assertEqual(update.expired, [])
        self.assertEqual(self.estimator.aggregates[VehicleClass.SMALL].count, 1)

    def test_sweep_keeps_younger_transits(self):
        """Test only transits past the timeout are removed."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.idle(30)
        self.estimator.update(VehicleClass.MEDIUM, False)
        self.idle(29)

        self.assertEqual([t.sequence_id for t in self.estimator.pending], [2])
        self.assertEqual(self.estimator.aggregates[VehicleClass.SMALL].count, 0)
        self.assertEqual(self.estimator.aggregates[VehicleClass.MEDIUM].count, 1)

    def test_trigger_after_expiry_is_underflow(self):
        """Test the speed line cannot complete an expired vehicle."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.idle(60)
        update = self.estimator.update(None, True)
        self.assertIsNone(update.completed)

    def test_reset(self):
        """Test reset clears the queue and aggregates."""
        self.estimator.update(VehicleClass.SMALL, False)
        self.estimator.update(VehicleClass.LARGE, True)
        self.estimator.reset()

        self.assertEqual(len(self.estimator.pending), 0)
        self.assertEqual(self.estimator.total_counted, 0)
        for aggregate in self.estimator.aggregates.values():
            self.assertEqual(aggregate.count, 0)
            self.assertEqual(aggregate.samples, 0)
        self.assertEqual(self.estimator.update(VehicleClass.SMALL, False).arrival.sequence_id, 1)

    def test_invalid_parameters(self):
        """Test non-positive frame rate and distance are rejected."""
        with self.assertRaises(ValueError):
            TransitEstimator(frames_per_second=0, line_distance_m=6.0)
        with self.assertRaises(ValueError):
            TransitEstimator(frames_per_second=30, line_distance_m=-1.0)


if __name__ == "__main__":
    unittest.main()
