"""
Reservation Lifecycle

State machine for a reservation's status:

	Pending ──> Confirmed ──> Cancelled
	   └───────────────────────────^

Confirmed is the only state produced by admission; Pending is reserved
(nothing produces it). Cancelled is terminal and is a soft delete.
Every function here is pure and returns a LifecycleResult; persisting the
new state is the store's job.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from .authorization import authorize_mutation
from .errors import AuthorizationDenied, CancellationWindowClosed, InvalidTransition, RoomBookingError
from .models import BookingPolicy, ProposedBooking, Reservation, ReservationStatus
from .validation import check_booking


ALLOWED_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
	ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
	ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED}),
	ReservationStatus.CANCELLED: frozenset(),
}


@dataclass
class LifecycleResult:
	reservation: Reservation
	error: Optional[Union[RoomBookingError, AuthorizationDenied]] = None
	changed: bool = False
	conflicts: List[Reservation] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.error is None

	@property
	def error_type(self) -> Optional[str]:
		return type(self.error).__name__ if self.error else None


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
	return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def admit(
	candidate: Reservation,
	reservations: Iterable[Reservation],
	now: datetime,
	policy: Optional[BookingPolicy] = None
) -> LifecycleResult:
	"""
	Creación: valida y, si pasa, devuelve la reserva en estado Confirmed.

	El llamador debe ejecutar la lectura de `reservations` y la escritura
	bajo el mismo lock de la sala.
	"""
	verdict = check_booking(_proposed(candidate), reservations, now, policy=policy)
	if not verdict.ok:
		return LifecycleResult(reservation=candidate, error=verdict.error, conflicts=verdict.conflicts)

	return LifecycleResult(
		reservation=candidate.with_status(ReservationStatus.CONFIRMED),
		changed=True
	)


def cancel(
	reservation: Reservation,
	now: datetime,
	user: Optional[str] = None,
	department_code: Optional[str] = None,
	policy: Optional[BookingPolicy] = None,
	is_manager: bool = False
) -> LifecycleResult:
	"""
	Confirmed -> Cancelled.

	- Requiere autorización (salvo is_manager).
	- Cancelar una reserva ya cancelada es un no-op exitoso (idempotente).
	- Con policy.cancellation_lead_hours, un no-manager no puede cancelar
	  con menos de esas horas antes del inicio.
	"""
	if not is_manager:
		auth = authorize_mutation(reservation, user=user, department_code=department_code)
		if not auth.authorized:
			return LifecycleResult(reservation=reservation, error=auth.error)

	if reservation.is_cancelled:
		return LifecycleResult(reservation=reservation)

	if not can_transition(reservation.status, ReservationStatus.CANCELLED):
		return LifecycleResult(reservation=reservation, error=InvalidTransition())

	if not is_manager and _inside_lead_time(reservation, now, policy):
		return LifecycleResult(reservation=reservation, error=CancellationWindowClosed())

	return LifecycleResult(
		reservation=reservation.with_status(ReservationStatus.CANCELLED),
		changed=True
	)


def edit(
	reservation: Reservation,
	reservations: Iterable[Reservation],
	now: datetime,
	room: Optional[str] = None,
	target_date: Optional[date] = None,
	start_time: Optional[time] = None,
	end_time: Optional[time] = None,
	user: Optional[str] = None,
	department_code: Optional[str] = None,
	policy: Optional[BookingPolicy] = None,
	is_manager: bool = False
) -> LifecycleResult:
	"""
	Cambio de sala/fecha/horario de una reserva existente.

	Cualquier cambio de horario vuelve a pasar por el Booking Validator
	excluyendo la propia reserva del conjunto de conflictos.
	"""
	if not is_manager:
		auth = authorize_mutation(reservation, user=user, department_code=department_code)
		if not auth.authorized:
			return LifecycleResult(reservation=reservation, error=auth.error)

	if reservation.is_cancelled:
		return LifecycleResult(reservation=reservation, error=InvalidTransition())

	updated = replace(
		reservation,
		room=room or reservation.room,
		date=target_date or reservation.date,
		start_time=start_time or reservation.start_time,
		end_time=end_time or reservation.end_time,
	)

	if not schedule_changed(reservation, updated):
		return LifecycleResult(reservation=reservation)

	verdict = check_booking(
		_proposed(updated),
		reservations,
		now,
		exclude_reservation=reservation.name,
		policy=policy
	)
	if not verdict.ok:
		return LifecycleResult(reservation=reservation, error=verdict.error, conflicts=verdict.conflicts)

	return LifecycleResult(reservation=updated, changed=True)


def schedule_changed(before: Reservation, after: Reservation) -> bool:
	return (
		before.room != after.room
		or before.date != after.date
		or before.start_time != after.start_time
		or before.end_time != after.end_time
	)


def _inside_lead_time(reservation: Reservation, now: datetime, policy: Optional[BookingPolicy]) -> bool:
	if policy is None or policy.cancellation_lead_hours is None:
		return False

	starts_at = datetime.combine(reservation.date, reservation.start_time)
	return starts_at - now.replace(tzinfo=None) < timedelta(hours=policy.cancellation_lead_hours)


def _proposed(reservation: Reservation) -> ProposedBooking:
	return ProposedBooking(
		room=reservation.room,
		date=reservation.date,
		start_time=reservation.start_time,
		end_time=reservation.end_time
	)
