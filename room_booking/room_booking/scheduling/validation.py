"""
Booking Validator

Checks a proposed reservation against the existing reservations of the room
on that date. Pure: it never reads or writes, so it serves both creation and
edit re-validation. Admission itself belongs to the caller, which must run
the read and the write under one lock (see store.admit).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .availability import is_in_past
from .errors import (
	InvalidInterval,
	OutsideBookingWindow,
	OutsideOperatingHours,
	RoomBookingError,
	SlotUnavailable,
)
from .models import BookingPolicy, ProposedBooking, Reservation
from .overlap import find_conflicts


@dataclass
class BookingVerdict:
	"""Resultado de validar una reserva propuesta."""

	error: Optional[RoomBookingError] = None
	conflicts: List[Reservation] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.error is None

	@property
	def error_type(self) -> Optional[str]:
		return type(self.error).__name__ if self.error else None


def check_booking(
	proposed: ProposedBooking,
	reservations: Iterable[Reservation],
	now: datetime,
	exclude_reservation: Optional[str] = None,
	policy: Optional[BookingPolicy] = None
) -> BookingVerdict:
	"""
	Valida una reserva propuesta ANTES de admitirla.

	Args:
		proposed: sala, fecha, inicio y fin propuestos
		reservations: reservas existentes de la sala en esa fecha
		now: instante actual (hora local)
		exclude_reservation: reserva a excluir del conjunto (edición en sitio)
		policy: ventana de reserva y horario de operación, si se aplican

	Returns:
		BookingVerdict: ok=True si se puede admitir; si no, error es
		InvalidInterval, SlotUnavailable, OutsideBookingWindow u
		OutsideOperatingHours (todos SlotUnavailable).

	Orden de validación:
		1. start < end
		2. no está en el pasado
		3. dentro de la ventana de reserva anticipada (policy)
		4. dentro del horario de operación del día (policy)
		5. sin solape con reservas confirmadas
	"""
	if proposed.start_time >= proposed.end_time:
		return BookingVerdict(error=InvalidInterval())

	if is_in_past(proposed.date, proposed.start_time, now):
		return BookingVerdict(error=SlotUnavailable())

	if policy is not None:
		window_error = _check_booking_window(proposed, now, policy)
		if window_error:
			return BookingVerdict(error=window_error)

		hours_error = _check_operating_hours(proposed, policy)
		if hours_error:
			return BookingVerdict(error=hours_error)

	same_room_and_date = [
		r for r in reservations
		if r.room == proposed.room and r.date == proposed.date
	]
	conflicts = find_conflicts(
		proposed.start_time,
		proposed.end_time,
		same_room_and_date,
		exclude_reservation=exclude_reservation
	)
	if conflicts:
		return BookingVerdict(error=SlotUnavailable(), conflicts=conflicts)

	return BookingVerdict()


def _check_booking_window(proposed: ProposedBooking, now: datetime, policy: BookingPolicy) -> Optional[OutsideBookingWindow]:
	if policy.booking_advance_days is None:
		return None

	last_bookable_day = now.date() + timedelta(days=policy.booking_advance_days)
	if proposed.date > last_bookable_day:
		return OutsideBookingWindow()
	return None


def _check_operating_hours(proposed: ProposedBooking, policy: BookingPolicy) -> Optional[OutsideOperatingHours]:
	if not policy.operating_hours:
		return None

	hours = policy.hours_for(proposed.date)
	if hours is None or not hours.enabled:
		return OutsideOperatingHours()

	if proposed.start_time < hours.start or proposed.end_time > hours.end:
		return OutsideOperatingHours()
	return None
