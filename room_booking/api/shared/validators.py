"""
Parsing of the raw request strings the booking endpoints receive.

Each helper returns the value in the shape the scheduling code consumes,
or raises frappe.ValidationError naming the argument.
"""

from datetime import date, datetime

import frappe
from frappe import _
from frappe.utils import cstr

from room_booking.room_booking.scheduling.models import ReservationStatus


DOCNAME_MAX_LENGTH = 140
TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_booking_date(value: str, field_name: str = "date") -> date:
    """ISO dates only; 10/06/2024 is ambiguous between locales."""
    text = _required(value, field_name)

    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        frappe.throw(
            _("Invalid {0}: use YYYY-MM-DD").format(field_name), frappe.ValidationError
        )


def parse_booking_time(value: str, field_name: str = "time") -> str:
    """
    Wall-clock time, HH:MM or HH:MM:SS in 24h.

    Returns:
        str: HH:MM:SS, the format of a Time field
    """
    text = _required(value, field_name)

    for time_format in TIME_FORMATS:
        try:
            return datetime.strptime(text, time_format).strftime("%H:%M:%S")
        except ValueError:
            continue

    frappe.throw(_("Invalid {0}: use HH:MM").format(field_name), frappe.ValidationError)


def clean_docname(value: str, field_name: str = "name") -> str:
    """Room and reservation IDs; existence is checked by the endpoint."""
    name = _required(value, field_name)

    if len(name) > DOCNAME_MAX_LENGTH:
        frappe.throw(_("{0} is too long").format(field_name), frappe.ValidationError)

    return name


def validate_status(status: str) -> str:
    """Status must be one of the Room Reservation statuses."""
    allowed = [s.value for s in ReservationStatus]
    status = cstr(status).strip().title()

    if status not in allowed:
        frappe.throw(
            _("Invalid status. Use one of: {0}").format(", ".join(allowed)),
            frappe.ValidationError
        )

    return status


def _required(value: str, field_name: str) -> str:
    text = cstr(value).strip()
    if not text:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)
    return text
