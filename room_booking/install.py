"""
Install hooks: roles and default settings.
"""

import frappe

from room_booking.room_booking.scheduling.settings import (
	DEFAULT_BOOKING_ADVANCE_DAYS,
	DEFAULT_CANCELLATION_LEAD_HOURS,
	DEFAULT_HOURS,
	DEFAULT_SLOT_DURATION,
	SETTINGS_DOCTYPE,
)


MANAGER_ROLE = "Room Booking Manager"


def after_install() -> None:
	create_manager_role()
	set_default_settings()
	frappe.db.commit()


def before_tests() -> None:
	after_install()


def create_manager_role() -> None:
	if frappe.db.exists("Role", MANAGER_ROLE):
		return

	frappe.get_doc({
		"doctype": "Role",
		"role_name": MANAGER_ROLE,
		"desk_access": 1,
	}).insert(ignore_permissions=True)


def set_default_settings() -> None:
	"""Completa Room Booking Settings con los valores por defecto del producto."""
	settings = frappe.get_single(SETTINGS_DOCTYPE)

	for day_type, (start, end, enabled) in DEFAULT_HOURS.items():
		if not settings.get(f"{day_type}_start"):
			settings.set(f"{day_type}_start", f"{start}:00")
		if not settings.get(f"{day_type}_end"):
			settings.set(f"{day_type}_end", f"{end}:00")
		if day_type != "weekdays" and settings.get(f"{day_type}_enabled") is None:
			settings.set(f"{day_type}_enabled", int(enabled))

	if not settings.slot_duration_minutes:
		settings.slot_duration_minutes = str(DEFAULT_SLOT_DURATION)
	if settings.booking_advance_days is None:
		settings.booking_advance_days = DEFAULT_BOOKING_ADVANCE_DAYS
	if settings.cancellation_lead_hours is None:
		settings.cancellation_lead_hours = DEFAULT_CANCELLATION_LEAD_HOURS

	for switch in ("enforce_booking_window", "enforce_cancellation_lead_time"):
		if settings.get(switch) is None:
			settings.set(switch, 1)

	settings.save(ignore_permissions=True)
