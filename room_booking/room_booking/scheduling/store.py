"""
Reservation Store

Frappe-backed collaborator of the scheduling core:
- reads "reservations of room X on date Y, optionally excluding Z"
- admits new reservations atomically per room
- persists cancellations and schedule edits

Admission discipline: the Meeting Room row is locked with SELECT ... FOR
UPDATE before the reservations of the day are read, and the lock is held until
the request transaction commits. Two bookers of the same room serialize on it,
so the second one re-reads after the first commits and gets SlotUnavailable.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import frappe
from frappe.utils import now_datetime

from . import lifecycle
from .authorization import normalize_department_code
from .availability import get_day_availability
from .errors import SlotUnavailable
from .models import ProposedBooking, Reservation, ReservationStatus, TimeSlot
from .settings import get_booking_policy, get_settings, get_slot_duration, local_now
from .utils import to_date, to_time
from .validation import BookingVerdict, check_booking


RESERVATION_DOCTYPE = "Room Reservation"
ROOM_DOCTYPE = "Meeting Room"
DEPARTMENT_CODE_DOCTYPE = "Department Code"

RESERVATION_FIELDS = [
	"name",
	"room",
	"date",
	"start_time",
	"end_time",
	"status",
	"booking_channel",
	"booked_by",
	"department_code",
	"title",
	"creation",
]


def get_reservations_for_day(
	room: str,
	target_date: date,
	exclude_reservation: Optional[str] = None,
	statuses: Optional[List[str]] = None,
	for_update: bool = False
) -> List[Reservation]:
	"""
	Reservas de una sala en una fecha.

	Args:
		room: nombre del Meeting Room
		target_date: fecha
		exclude_reservation: reserva a excluir (ediciones)
		statuses: filtrar por status (None = todos)
		for_update: lectura con lock; siempre ve la última versión commiteada

	Returns:
		list[Reservation]: ordenadas por start_time
	"""
	filters = {"room": room, "date": target_date}

	if statuses:
		filters["status"] = ["in", statuses]

	if exclude_reservation:
		filters["name"] = ["!=", exclude_reservation]

	rows = frappe.get_all(
		RESERVATION_DOCTYPE,
		filters=filters,
		fields=RESERVATION_FIELDS,
		order_by="start_time asc",
		for_update=for_update
	)
	return [Reservation.from_doc(row) for row in rows]


def get_confirmed_reservations(
	room: str,
	target_date: date,
	exclude_reservation: Optional[str] = None,
	for_update: bool = False
) -> List[Reservation]:
	return get_reservations_for_day(
		room,
		target_date,
		exclude_reservation=exclude_reservation,
		statuses=[ReservationStatus.CONFIRMED.value],
		for_update=for_update
	)


def find_department_code(code: Optional[str]) -> Optional[Dict[str, Any]]:
	"""
	Busca un Department Code activo (trim + case-insensitive).

	La comparación se hace en Python para no depender de la collation de la BD.

	Returns:
		dict | None: {"code", "department_name"} del registro activo
	"""
	wanted = normalize_department_code(code)
	if not wanted:
		return None

	for row in frappe.get_all(
		DEPARTMENT_CODE_DOCTYPE,
		filters={"is_active": 1},
		fields=["code", "department_name"]
	):
		if normalize_department_code(row.code) == wanted:
			return row

	return None


def lock_room(room: str) -> Any:
	"""SELECT ... FOR UPDATE sobre el Meeting Room; se libera con el commit."""
	return frappe.get_doc(ROOM_DOCTYPE, room, for_update=True)


def get_room_availability(room: str, target_date: date) -> List[TimeSlot]:
	"""
	Slots anotados de una sala para un día.

	Una sala inactiva no tiene slots reservables.
	"""
	room_doc = frappe.get_cached_doc(ROOM_DOCTYPE, room)
	if not room_doc.is_active:
		return []

	settings = get_settings()
	policy = get_booking_policy(settings)

	return get_day_availability(
		policy.hours_for(target_date),
		get_slot_duration(settings),
		get_reservations_for_day(room, target_date),
		target_date,
		local_now(settings)
	)


def check_schedule(doc: Any) -> BookingVerdict:
	"""
	Valida el horario de un doc de Room Reservation bajo el lock de la sala.

	Se usa para ediciones: excluye la propia reserva del conjunto.
	"""
	room_doc = lock_room(doc.room)
	if not room_doc.is_active:
		return BookingVerdict(error=SlotUnavailable())

	candidate = Reservation.from_doc(doc)
	exclude = None if doc.is_new() else doc.name

	return check_booking(
		ProposedBooking(
			room=candidate.room,
			date=candidate.date,
			start_time=candidate.start_time,
			end_time=candidate.end_time
		),
		get_confirmed_reservations(
			candidate.room, candidate.date, exclude_reservation=exclude, for_update=True
		),
		local_now(),
		exclude_reservation=exclude,
		policy=get_booking_policy()
	)


def admit(doc: Any) -> lifecycle.LifecycleResult:
	"""
	Admisión de una reserva nueva bajo el lock de la sala.

	Devuelve el resultado del ciclo de vida; el doc se inserta en la misma
	transacción que sostiene el lock.
	"""
	room_doc = lock_room(doc.room)
	candidate = Reservation.from_doc(doc)

	if not room_doc.is_active:
		return lifecycle.LifecycleResult(reservation=candidate, error=SlotUnavailable())

	return lifecycle.admit(
		candidate,
		get_confirmed_reservations(candidate.room, candidate.date, for_update=True),
		local_now(),
		policy=get_booking_policy()
	)


def cancel_reservation(
	reservation_name: str,
	user: Optional[str] = None,
	department_code: Optional[str] = None,
	is_manager: bool = False
) -> lifecycle.LifecycleResult:
	"""
	Cancela una reserva (soft delete) si el actor está autorizado.

	Idempotente: cancelar una reserva ya cancelada devuelve ok sin cambios.
	El update es de una sola fila bajo el lock de esa fila.
	"""
	doc = frappe.get_doc(RESERVATION_DOCTYPE, reservation_name, for_update=True)

	result = lifecycle.cancel(
		Reservation.from_doc(doc),
		local_now(),
		user=user,
		department_code=department_code,
		policy=get_booking_policy(include_hours=False),
		is_manager=is_manager
	)

	if result.changed:
		doc.db_set({
			"status": ReservationStatus.CANCELLED.value,
			"cancelled_at": now_datetime(),
			"cancelled_by": user or frappe.session.user,
		})
		doc.add_comment(
			"Info",
			f"Reserva cancelada por {'Room Booking Manager' if is_manager else (user or 'código de departamento')}"
		)
		frappe.logger("room_booking").info(
			f"Reservation cancelled: {doc.name} "
			f"(Room: {doc.room}, Date: {doc.date}, "
			f"By: {'manager ' if is_manager else ''}{user or 'department code'})"
		)

	return result


def update_reservation_schedule(
	reservation_name: str,
	room: Optional[str] = None,
	target_date: Optional[date] = None,
	start_time: Optional[Any] = None,
	end_time: Optional[Any] = None,
	user: Optional[str] = None,
	department_code: Optional[str] = None,
	is_manager: bool = False
) -> lifecycle.LifecycleResult:
	"""
	Cambia sala/fecha/horario de una reserva, re-validando como en la creación.

	Orden de locks igual que un save() desde el desk (check_if_latest):
	primero la fila de la reserva, después la sala destino. Un deadlock que
	aun así ocurra llega al llamador como QueryDeadlockError.
	"""
	doc = frappe.get_doc(RESERVATION_DOCTYPE, reservation_name, for_update=True)
	current = Reservation.from_doc(doc)

	target_room = room or current.room
	room_doc = lock_room(target_room)

	if not room_doc.is_active:
		return lifecycle.LifecycleResult(reservation=current, error=SlotUnavailable())

	day = to_date(target_date) if target_date else current.date

	result = lifecycle.edit(
		current,
		get_confirmed_reservations(target_room, day, exclude_reservation=current.name, for_update=True),
		local_now(),
		room=target_room,
		target_date=day,
		start_time=to_time(start_time) if start_time else None,
		end_time=to_time(end_time) if end_time else None,
		user=user,
		department_code=department_code,
		policy=get_booking_policy(),
		is_manager=is_manager
	)

	if result.changed:
		updated = result.reservation
		doc.update({
			"room": updated.room,
			"date": updated.date,
			"start_time": updated.start_time,
			"end_time": updated.end_time,
		})
		doc.flags.schedule_validated = True
		doc.save(ignore_permissions=True)

		frappe.logger("room_booking").info(
			f"Reservation rescheduled: {doc.name} -> {updated.room} {updated.date} "
			f"{updated.start_time}-{updated.end_time}"
		)

	return result
