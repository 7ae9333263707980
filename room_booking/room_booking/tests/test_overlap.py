"""
Tests for scheduling/overlap.py

Tests half-open interval overlap and conflict detection.
"""

import unittest
from datetime import date, time

from room_booking.room_booking.scheduling.models import Reservation, ReservationStatus
from room_booking.room_booking.scheduling.overlap import find_conflicts, intervals_overlap


DAY = date(2024, 6, 10)


def make_reservation(name, start, end, status=ReservationStatus.CONFIRMED):
	return Reservation(
		name=name,
		room="Sala Andes",
		date=DAY,
		start_time=start,
		end_time=end,
		status=status,
		booked_by="owner@example.com",
	)


class TestIntervalsOverlap(unittest.TestCase):
	"""Tests for intervals_overlap."""

	def test_overlapping_ranges(self):
		self.assertTrue(intervals_overlap(time(9, 0), time(10, 0), time(9, 30), time(10, 30)))
		self.assertTrue(intervals_overlap(time(9, 30), time(10, 30), time(9, 0), time(10, 0)))

	def test_contained_range(self):
		self.assertTrue(intervals_overlap(time(9, 0), time(12, 0), time(10, 0), time(11, 0)))
		self.assertTrue(intervals_overlap(time(10, 0), time(11, 0), time(9, 0), time(12, 0)))

	def test_adjacent_ranges_do_not_overlap(self):
		"""Test that [9,10) and [10,11) share only a boundary."""
		self.assertFalse(intervals_overlap(time(9, 0), time(10, 0), time(10, 0), time(11, 0)))
		self.assertFalse(intervals_overlap(time(10, 0), time(11, 0), time(9, 0), time(10, 0)))

	def test_disjoint_ranges(self):
		self.assertFalse(intervals_overlap(time(8, 0), time(9, 0), time(14, 0), time(15, 0)))

	def test_symmetry(self):
		"""Test that overlap(a, b) == overlap(b, a) over a grid of ranges."""
		points = [time(h, m) for h in range(8, 12) for m in (0, 30)]
		ranges = [(a, b) for a in points for b in points if a < b]

		for a in ranges:
			for b in ranges:
				self.assertEqual(
					intervals_overlap(a[0], a[1], b[0], b[1]),
					intervals_overlap(b[0], b[1], a[0], a[1])
				)


class TestFindConflicts(unittest.TestCase):
	"""Tests for find_conflicts."""

	def setUp(self):
		self.reservations = [
			make_reservation("RR-3", time(14, 0), time(15, 0)),
			make_reservation("RR-1", time(9, 0), time(10, 30)),
			make_reservation("RR-2", time(11, 0), time(12, 0), status=ReservationStatus.CANCELLED),
		]

	def test_detects_confirmed_conflict(self):
		conflicts = find_conflicts(time(10, 0), time(11, 0), self.reservations)

		self.assertEqual([r.name for r in conflicts], ["RR-1"])

	def test_cancelled_reservations_do_not_block(self):
		self.assertEqual(find_conflicts(time(11, 0), time(12, 0), self.reservations), [])

	def test_pending_reservations_do_not_block(self):
		pending = [make_reservation("RR-P", time(16, 0), time(17, 0), status=ReservationStatus.PENDING)]

		self.assertEqual(find_conflicts(time(16, 0), time(17, 0), pending), [])

	def test_excluded_reservation_is_ignored(self):
		"""Test that an edit does not conflict with itself."""
		conflicts = find_conflicts(
			time(9, 30), time(10, 30), self.reservations, exclude_reservation="RR-1"
		)

		self.assertEqual(conflicts, [])

	def test_conflicts_sorted_by_start(self):
		conflicts = find_conflicts(time(8, 0), time(17, 0), self.reservations)

		self.assertEqual([r.name for r in conflicts], ["RR-1", "RR-3"])

	def test_boundary_is_free(self):
		"""Test that a range starting at a reservation's end has no conflict."""
		self.assertEqual(find_conflicts(time(10, 30), time(11, 0), self.reservations), [])
