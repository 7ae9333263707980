"""
Availability Service

Annotates the slots of a day for a room with their availability,
considering:
- Confirmed reservations of the room on that date (half-open overlap)
- Slots that already started ("now" counts as past)
- Closed days / operating hours per day type
"""

from datetime import date, datetime, time
from typing import Iterable, List, Optional

from .models import OperatingHours, Reservation, TimeSlot
from .overlap import find_conflicts
from .slots import generate_time_slots


def is_in_past(target_date: date, start_time: time, now: datetime) -> bool:
	"""
	Regla de "ya pasó".

	Pasado si la fecha es anterior a hoy, o si es hoy y la hora de inicio es
	menor o igual a la hora actual (el instante "now" cuenta como pasado).
	"""
	today = now.date()
	if target_date < today:
		return True
	if target_date == today and start_time <= now.time():
		return True
	return False


def evaluate_availability(
	slots: Iterable[TimeSlot],
	reservations: Iterable[Reservation],
	target_date: date,
	now: datetime
) -> List[TimeSlot]:
	"""
	Marca cada slot como disponible o bloqueado.

	Args:
		slots: secuencia de slots del día (de generate_time_slots)
		reservations: reservas de la sala en esa fecha (cualquier status)
		target_date: fecha evaluada
		now: instante actual (hora local de la instalación)

	Returns:
		list[TimeSlot]: nuevos slots anotados; si el bloqueo es por una reserva,
		slot.booking es esa reserva. Los slots de entrada no se modifican.
	"""
	day_reservations = [r for r in reservations if r.date == target_date]

	annotated = []
	for slot in slots:
		conflicts = find_conflicts(slot.time, slot.end, day_reservations)
		booking = conflicts[0] if conflicts else None
		past = is_in_past(target_date, slot.time, now)

		annotated.append(TimeSlot(
			time=slot.time,
			end=slot.end,
			available=booking is None and not past,
			booking=booking,
			is_past=past
		))

	return annotated


def get_day_availability(
	hours: Optional[OperatingHours],
	slot_duration_minutes: int,
	reservations: Iterable[Reservation],
	target_date: date,
	now: datetime
) -> List[TimeSlot]:
	"""
	Genera y evalúa los slots de un día.

	Un día sin horario o con el horario deshabilitado no tiene slots.
	"""
	if hours is None or not hours.enabled:
		return []

	slots = generate_time_slots(hours.start, hours.end, slot_duration_minutes)
	return evaluate_availability(slots, reservations, target_date, now)
