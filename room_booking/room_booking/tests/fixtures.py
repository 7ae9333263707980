"""
Shared fixtures for the site-backed tests.
"""

from datetime import timedelta

import frappe
from frappe.utils import getdate

from room_booking.install import create_manager_role
from room_booking.room_booking.scheduling.settings import SETTINGS_DOCTYPE


TEST_ROOM = "Test Room Booking"
INACTIVE_ROOM = "Test Room Inactive"
TEST_DEPARTMENT_CODE = "QA-TEST"


def next_day(weekday: int, min_days_ahead: int = 2):
	"""Próxima fecha con ese weekday (0 = lunes) a min_days_ahead o más días."""
	day = getdate() + timedelta(days=min_days_ahead)
	while day.weekday() != weekday:
		day += timedelta(days=1)
	return day


def next_business_day(min_days_ahead: int = 2):
	day = getdate() + timedelta(days=min_days_ahead)
	while day.weekday() >= 5:
		day += timedelta(days=1)
	return day


def setup_booking_fixtures() -> None:
	"""Rol, settings conocidos, salas y código de departamento de prueba."""
	create_manager_role()

	settings = frappe.get_single(SETTINGS_DOCTYPE)
	settings.update({
		"weekdays_start": "08:00:00",
		"weekdays_end": "17:00:00",
		"saturday_enabled": 1,
		"saturday_start": "09:00:00",
		"saturday_end": "16:00:00",
		"sunday_enabled": 0,
		"sunday_start": "09:00:00",
		"sunday_end": "16:00:00",
		"slot_duration_minutes": "30",
		"timezone": "",
		"booking_advance_days": 30,
		"enforce_booking_window": 1,
		"cancellation_lead_hours": 2,
		"enforce_cancellation_lead_time": 1,
	})
	settings.save(ignore_permissions=True)

	for room_name, is_active in ((TEST_ROOM, 1), (INACTIVE_ROOM, 0)):
		if not frappe.db.exists("Meeting Room", room_name):
			frappe.get_doc({
				"doctype": "Meeting Room",
				"room_name": room_name,
				"capacity": 6,
				"amenities": "Projector\nWhiteboard",
				"is_active": is_active,
			}).insert(ignore_permissions=True)

	if not frappe.db.exists("Department Code", TEST_DEPARTMENT_CODE):
		frappe.get_doc({
			"doctype": "Department Code",
			"code": TEST_DEPARTMENT_CODE,
			"department_name": "Quality Assurance",
			"is_active": 1,
		}).insert(ignore_permissions=True)


def make_reservation(target_date, start_time, end_time, room=TEST_ROOM, **kwargs):
	values = {
		"doctype": "Room Reservation",
		"room": room,
		"date": target_date,
		"start_time": start_time,
		"end_time": end_time,
		"title": "Test meeting",
	}
	values.update(kwargs)
	return frappe.get_doc(values)


def clear_reservations() -> None:
	frappe.db.delete("Room Reservation", {"room": ["in", [TEST_ROOM, INACTIVE_ROOM]]})


def ensure_user(email: str) -> str:
	if not frappe.db.exists("User", email):
		frappe.get_doc({
			"doctype": "User",
			"email": email,
			"first_name": email.split("@")[0],
			"send_welcome_email": 0,
		}).insert(ignore_permissions=True)
	return email
