"""
Slot Generation Service

Generates the discrete candidate time slots of a day from the operating
hours and the configured slot duration. Pure: no database access.
"""

from datetime import time
from typing import List, Union

from .models import TimeSlot
from .utils import minutes_of, to_time


def generate_time_slots(
	operating_start: Union[time, str],
	operating_end: Union[time, str],
	slot_duration_minutes: int
) -> List[TimeSlot]:
	"""
	Genera slots discretos [time, end) dentro del horario de operación.

	Args:
		operating_start: inicio del horario (time o "HH:MM")
		operating_end: fin del horario (time o "HH:MM")
		slot_duration_minutes: duración de cada slot en minutos

	Returns:
		list[TimeSlot]: ordenados por hora, todos con available=True.
		La lista es nueva en cada llamada, se puede recorrer varias veces.

	Algoritmo:
		1. Convertir inicio y fin a minutos desde medianoche
		2. Avanzar en pasos de slot_duration_minutes
		3. Si el slot se pasa del fin, se descarta (truncar, no rellenar)
	"""
	start = to_time(operating_start)
	start_minutes = minutes_of(start)

	# Ningún slot empieza antes de abrir: segundos sueltos redondean hacia arriba
	if start.second or start.microsecond:
		start_minutes += 1

	end_minutes = minutes_of(to_time(operating_end))

	slots = []
	current = start_minutes

	while current < end_minutes:
		slot_end = current + slot_duration_minutes

		# Slot parcial al final del día: se descarta
		if slot_end > end_minutes:
			break

		slots.append(TimeSlot(time=_from_minutes(current), end=_from_minutes(slot_end)))
		current = slot_end

	return slots


def _from_minutes(minutes: int) -> time:
	return time(minutes // 60, minutes % 60)
