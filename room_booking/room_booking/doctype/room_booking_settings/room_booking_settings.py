# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Room Booking Settings DocType

Configuración global del motor de reservas: horario de operación por tipo de
día, duración de los slots, ventana de reserva anticipada y plazo mínimo de
cancelación.
"""

import frappe
import pytz
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint

from room_booking.room_booking.scheduling.settings import SUPPORTED_SLOT_DURATIONS
from room_booking.room_booking.scheduling.utils import to_time


class RoomBookingSettings(Document):
	"""
	Validations:
	- slot_duration_minutes in SUPPORTED_SLOT_DURATIONS (never 0 or negative)
	- start < end for every enabled day type, in whole minutes
	- booking_advance_days and cancellation_lead_hours not negative
	- timezone, if set, must be a known pytz timezone
	"""

	def validate(self) -> None:
		self._validate_slot_duration()
		self._validate_operating_hours()
		self._validate_policies()
		self._validate_timezone()

	def _validate_slot_duration(self) -> None:
		duration = cint(self.slot_duration_minutes)
		if duration not in SUPPORTED_SLOT_DURATIONS:
			frappe.throw(
				_("Slot Duration must be one of {0} minutes").format(
					", ".join(str(d) for d in SUPPORTED_SLOT_DURATIONS)
				)
			)

	def _validate_operating_hours(self) -> None:
		day_types = [
			("weekdays", _("Weekdays"), True),
			("saturday", _("Saturday"), cint(self.saturday_enabled)),
			("sunday", _("Sunday"), cint(self.sunday_enabled)),
		]

		for day_type, label, enabled in day_types:
			if not enabled:
				continue

			start_value = self.get(f"{day_type}_start")
			end_value = self.get(f"{day_type}_end")
			if not start_value or not end_value:
				frappe.throw(_("{0}: Start and End are required").format(label))

			start = to_time(start_value)
			end = to_time(end_value)
			if start.second or end.second:
				frappe.throw(_("{0}: Start and End must be whole minutes").format(label))

			if start >= end:
				frappe.throw(
					_("{0}: Start ({1}) must be before End ({2})").format(
						label, start.strftime("%H:%M"), end.strftime("%H:%M")
					)
				)

	def _validate_policies(self) -> None:
		if cint(self.booking_advance_days) < 0:
			frappe.throw(_("Advance Booking Window cannot be negative"))

		if cint(self.cancellation_lead_hours) < 0:
			frappe.throw(_("Cancellation Lead Time cannot be negative"))

	def _validate_timezone(self) -> None:
		if self.timezone and self.timezone not in pytz.all_timezones_set:
			frappe.throw(_("Unknown timezone: {0}").format(self.timezone))
