"""
Tests for scheduling/availability.py

Tests slot annotation: reservations, the past-time rule and closed days.
"""

import unittest
from datetime import date, datetime, time

from room_booking.room_booking.scheduling.availability import (
	evaluate_availability,
	get_day_availability,
	is_in_past,
)
from room_booking.room_booking.scheduling.models import OperatingHours, Reservation, ReservationStatus
from room_booking.room_booking.scheduling.slots import generate_time_slots


DAY = date(2024, 6, 10)
MORNING_BEFORE = datetime(2024, 6, 9, 18, 0)


def make_reservation(name, start, end, status=ReservationStatus.CONFIRMED, day=DAY, title=""):
	return Reservation(
		name=name,
		room="R",
		date=day,
		start_time=start,
		end_time=end,
		status=status,
		booked_by="owner@example.com",
		title=title,
	)


def by_start(slots):
	return {slot.time: slot for slot in slots}


class TestIsInPast(unittest.TestCase):
	"""Tests for the past-time rule."""

	def test_earlier_date(self):
		self.assertTrue(is_in_past(date(2024, 6, 9), time(23, 0), datetime(2024, 6, 10, 8, 0)))

	def test_later_date(self):
		self.assertFalse(is_in_past(date(2024, 6, 11), time(0, 0), datetime(2024, 6, 10, 23, 0)))

	def test_same_day_started(self):
		self.assertTrue(is_in_past(DAY, time(14, 0), datetime(2024, 6, 10, 14, 5)))

	def test_start_equal_to_now_is_past(self):
		"""Test that a slot starting exactly now is already past."""
		self.assertTrue(is_in_past(DAY, time(14, 30), datetime(2024, 6, 10, 14, 30)))

	def test_same_day_future(self):
		self.assertFalse(is_in_past(DAY, time(14, 30), datetime(2024, 6, 10, 14, 5)))


class TestEvaluateAvailability(unittest.TestCase):
	"""Tests for evaluate_availability."""

	def setUp(self):
		self.slots = generate_time_slots(time(8, 0), time(17, 0), 30)
		self.reservations = [make_reservation("RR-1", time(9, 0), time(10, 30), title="Standup")]

	def test_reference_day(self):
		"""Test the 08:00-17:00 day with a 09:00-10:30 reservation."""
		annotated = evaluate_availability(self.slots, self.reservations, DAY, MORNING_BEFORE)
		slots = by_start(annotated)

		self.assertEqual(len(annotated), 18)
		for blocked in (time(9, 0), time(9, 30), time(10, 0)):
			self.assertFalse(slots[blocked].available)
			self.assertEqual(slots[blocked].booking.name, "RR-1")

		self.assertTrue(slots[time(8, 30)].available)
		self.assertTrue(slots[time(10, 30)].available)
		self.assertIsNone(slots[time(10, 30)].booking)

	def test_blocking_reservation_is_serialized(self):
		annotated = evaluate_availability(self.slots, self.reservations, DAY, MORNING_BEFORE)
		data = by_start(annotated)[time(9, 0)].as_dict()

		self.assertEqual(data["booking"], "RR-1")
		self.assertEqual(data["booking_title"], "Standup")

	def test_past_rule_at_1405(self):
		"""Test that at 14:05 the 14:00 slot is past and 14:30 is open."""
		slots = generate_time_slots(time(14, 0), time(15, 0), 30)
		annotated = by_start(evaluate_availability(slots, [], DAY, datetime(2024, 6, 10, 14, 5)))

		self.assertFalse(annotated[time(14, 0)].available)
		self.assertTrue(annotated[time(14, 0)].is_past)
		self.assertIsNone(annotated[time(14, 0)].booking)
		self.assertTrue(annotated[time(14, 30)].available)

	def test_cancelled_reservation_ignored(self):
		reservations = [make_reservation("RR-C", time(9, 0), time(10, 0), status=ReservationStatus.CANCELLED)]
		annotated = evaluate_availability(self.slots, reservations, DAY, MORNING_BEFORE)

		self.assertTrue(all(slot.available for slot in annotated))

	def test_other_dates_ignored(self):
		reservations = [make_reservation("RR-X", time(9, 0), time(10, 0), day=date(2024, 6, 11))]
		annotated = evaluate_availability(self.slots, reservations, DAY, MORNING_BEFORE)

		self.assertTrue(all(slot.available for slot in annotated))

	def test_input_slots_not_modified(self):
		evaluate_availability(self.slots, self.reservations, DAY, MORNING_BEFORE)

		self.assertTrue(all(slot.available for slot in self.slots))

	def test_whole_day_past(self):
		annotated = evaluate_availability(self.slots, [], DAY, datetime(2024, 6, 11, 7, 0))

		self.assertTrue(all(slot.is_past and not slot.available for slot in annotated))


class TestGetDayAvailability(unittest.TestCase):
	"""Tests for get_day_availability."""

	def test_open_day(self):
		hours = OperatingHours(start=time(8, 0), end=time(17, 0))
		slots = get_day_availability(hours, 60, [], DAY, MORNING_BEFORE)

		self.assertEqual(len(slots), 9)

	def test_closed_day_has_no_slots(self):
		hours = OperatingHours(start=time(9, 0), end=time(16, 0), enabled=False)

		self.assertEqual(get_day_availability(hours, 30, [], DAY, MORNING_BEFORE), [])

	def test_missing_hours_has_no_slots(self):
		self.assertEqual(get_day_availability(None, 30, [], DAY, MORNING_BEFORE), [])
