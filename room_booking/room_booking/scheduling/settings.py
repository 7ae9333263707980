"""
Settings Reader

Turns the Room Booking Settings single doctype into the plain values the
scheduling core consumes (OperatingHours, BookingPolicy, slot duration) and
provides the deployment-local "now".
"""

from datetime import datetime
from typing import Any, Dict, Optional

import frappe
import pytz
from frappe.utils import cint, get_system_timezone, now_datetime

from .models import BookingPolicy, OperatingHours
from .utils import to_time


SETTINGS_DOCTYPE = "Room Booking Settings"

SUPPORTED_SLOT_DURATIONS = (15, 30, 60)
DEFAULT_SLOT_DURATION = 30
DEFAULT_BOOKING_ADVANCE_DAYS = 30
DEFAULT_CANCELLATION_LEAD_HOURS = 2

# Valores por defecto de instalación
DEFAULT_HOURS = {
	"weekdays": ("08:00", "17:00", True),
	"saturday": ("09:00", "16:00", True),
	"sunday": ("09:00", "16:00", False),
}


def get_settings() -> Any:
	return frappe.get_cached_doc(SETTINGS_DOCTYPE)


def get_slot_duration(settings: Optional[Any] = None) -> int:
	settings = settings or get_settings()
	return cint(settings.slot_duration_minutes) or DEFAULT_SLOT_DURATION


def get_operating_hours(settings: Optional[Any] = None) -> Dict[str, OperatingHours]:
	"""
	Obtiene el horario de operación por tipo de día.

	Returns:
		dict: {"weekdays": OperatingHours, "saturday": ..., "sunday": ...}
	"""
	settings = settings or get_settings()
	hours = {}

	for day_type, (default_start, default_end, default_enabled) in DEFAULT_HOURS.items():
		if day_type == "weekdays":
			enabled = True
		else:
			enabled_value = settings.get(f"{day_type}_enabled")
			enabled = default_enabled if enabled_value is None else bool(cint(enabled_value))

		hours[day_type] = OperatingHours(
			start=to_time(settings.get(f"{day_type}_start") or default_start),
			end=to_time(settings.get(f"{day_type}_end") or default_end),
			enabled=enabled
		)

	return hours


def get_booking_policy(settings: Optional[Any] = None, include_hours: bool = True) -> BookingPolicy:
	"""
	Construye la BookingPolicy según los switches de enforcement.

	Un switch apagado deja el campo en None (la regla no se aplica).
	"""
	settings = settings or get_settings()

	advance_days = None
	if cint(settings.enforce_booking_window):
		advance_days = cint(settings.booking_advance_days)

	lead_hours = None
	if cint(settings.enforce_cancellation_lead_time):
		lead_hours = cint(settings.cancellation_lead_hours)

	return BookingPolicy(
		booking_advance_days=advance_days,
		cancellation_lead_hours=lead_hours,
		operating_hours=get_operating_hours(settings) if include_hours else None
	)


def get_timezone_name(settings: Optional[Any] = None) -> str:
	settings = settings or get_settings()
	return settings.timezone or get_system_timezone()


def local_now(settings: Optional[Any] = None) -> datetime:
	"""
	Hora de pared actual de la instalación (naive).

	Usa el timezone configurado; si no es válido, cae al timezone del sistema.
	"""
	settings = settings or get_settings()
	if not settings.timezone:
		return now_datetime()

	try:
		tz = pytz.timezone(settings.timezone)
	except pytz.UnknownTimeZoneError:
		frappe.log_error(
			f"Invalid timezone '{settings.timezone}' in {SETTINGS_DOCTYPE}, using system timezone",
			"Room Booking Settings"
		)
		return now_datetime()

	return datetime.now(tz).replace(tzinfo=None)
