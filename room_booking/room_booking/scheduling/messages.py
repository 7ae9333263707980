"""
User-facing messages for booking errors.

The core only returns typed errors; this is where the DocType and API layers
turn them into translated frappe.throw calls.
"""

from typing import Iterable, Optional

import frappe
from frappe import _

from . import errors
from .models import Reservation
from .utils import format_time


def describe(error: Exception, conflicts: Optional[Iterable[Reservation]] = None) -> str:
	"""Mensaje traducido para un error del motor de reservas."""
	if isinstance(error, errors.InvalidInterval):
		return _("Start time must be before end time")

	if isinstance(error, errors.OutsideBookingWindow):
		return _("The selected date is beyond the advance booking window")

	if isinstance(error, errors.OutsideOperatingHours):
		return _("The selected time is outside the room's operating hours")

	if isinstance(error, errors.SlotUnavailable):
		conflicts = list(conflicts or [])
		if conflicts:
			ranges = ", ".join(
				f"{format_time(r.start_time)}-{format_time(r.end_time)}" for r in conflicts
			)
			return _("The room is already booked at {0}").format(ranges)
		return _("The selected time slot is no longer available")

	if isinstance(error, errors.CancellationWindowClosed):
		return _("This reservation can no longer be cancelled; the cancellation deadline has passed")

	if isinstance(error, errors.InvalidTransition):
		return _("This change is not allowed for the reservation's current status")

	if isinstance(error, errors.WrongOwner):
		return _("Only the person who made this reservation can change it")

	if isinstance(error, errors.WrongDepartmentCode):
		return _("The department code does not match this reservation")

	if isinstance(error, errors.MissingOwnershipData):
		return _("This reservation has no department code on file and cannot be changed with one")

	if isinstance(error, errors.MissingCredential):
		return _("Sign in or present the reservation's department code")

	return _("The reservation could not be processed")


def throw_for(error: Exception, conflicts: Optional[Iterable[Reservation]] = None) -> None:
	"""frappe.throw con el mensaje y la clase de excepción del error."""
	frappe.throw(describe(error, conflicts), type(error), title=_("Room Booking"))
