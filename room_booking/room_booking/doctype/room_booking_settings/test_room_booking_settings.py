# Copyright (c) 2026, Sebastian Ortiz Valencia and Contributors
# See license.txt

import frappe
from frappe.tests.utils import FrappeTestCase

from room_booking.room_booking.scheduling.settings import (
	get_booking_policy,
	get_operating_hours,
	get_slot_duration,
	local_now,
)
from room_booking.room_booking.tests.fixtures import setup_booking_fixtures


class TestRoomBookingSettings(FrappeTestCase):
	"""Tests for Room Booking Settings validation and the settings reader."""

	def setUp(self):
		setup_booking_fixtures()
		self.settings = frappe.get_single("Room Booking Settings")

	def tearDown(self):
		frappe.db.rollback()

	def test_start_must_precede_end(self):
		self.settings.weekdays_start = "17:00:00"
		self.settings.weekdays_end = "08:00:00"

		with self.assertRaises(frappe.ValidationError):
			self.settings.save(ignore_permissions=True)

	def test_hours_must_be_whole_minutes(self):
		self.settings.weekdays_start = "08:00:30"

		with self.assertRaises(frappe.ValidationError):
			self.settings.save(ignore_permissions=True)

	def test_disabled_day_not_checked(self):
		"""Test that a closed Sunday may keep inconsistent hours."""
		self.settings.sunday_enabled = 0
		self.settings.sunday_start = "16:00:00"
		self.settings.sunday_end = "09:00:00"
		self.settings.save(ignore_permissions=True)

	def test_negative_policies_rejected(self):
		self.settings.booking_advance_days = -1

		with self.assertRaises(frappe.ValidationError):
			self.settings.save(ignore_permissions=True)

	def test_unknown_timezone_rejected(self):
		self.settings.timezone = "Mars/Olympus_Mons"

		with self.assertRaises(frappe.ValidationError):
			self.settings.save(ignore_permissions=True)

	def test_reader_values(self):
		hours = get_operating_hours(self.settings)

		self.assertEqual(get_slot_duration(self.settings), 30)
		self.assertEqual(hours["weekdays"].start.hour, 8)
		self.assertEqual(hours["weekdays"].end.hour, 17)
		self.assertTrue(hours["saturday"].enabled)
		self.assertFalse(hours["sunday"].enabled)

	def test_enforcement_switches(self):
		self.assertEqual(get_booking_policy(self.settings).booking_advance_days, 30)

		self.settings.enforce_booking_window = 0
		self.settings.enforce_cancellation_lead_time = 0
		policy = get_booking_policy(self.settings)

		self.assertIsNone(policy.booking_advance_days)
		self.assertIsNone(policy.cancellation_lead_hours)

	def test_local_now_with_timezone(self):
		self.settings.timezone = "America/Bogota"

		self.assertIsNone(local_now(self.settings).tzinfo)
