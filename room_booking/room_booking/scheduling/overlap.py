"""
Overlap Detection Service

Detects scheduling conflicts between a time range and the reservations of a
room on one date. Only Confirmed reservations block; Cancelled (soft deleted)
and Pending ones are ignored.
"""

from datetime import time
from typing import Iterable, List, Optional

from .models import Reservation


def intervals_overlap(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
	"""Half-open [start, end): se solapan si a.start < b.end AND b.start < a.end."""
	return a_start < b_end and b_start < a_end


def find_conflicts(
	start_time: time,
	end_time: time,
	reservations: Iterable[Reservation],
	exclude_reservation: Optional[str] = None
) -> List[Reservation]:
	"""
	Detecta reservas confirmadas que se solapan con [start_time, end_time).

	Args:
		start_time: inicio del rango a validar
		end_time: fin del rango a validar
		reservations: reservas de la sala en la fecha
		exclude_reservation: nombre de la reserva a excluir (para ediciones)

	Returns:
		list[Reservation]: reservas en conflicto, ordenadas por hora de inicio
	"""
	conflicts = [
		r for r in reservations
		if r.is_confirmed
		and (not exclude_reservation or r.name != exclude_reservation)
		and intervals_overlap(start_time, end_time, r.start_time, r.end_time)
	]
	conflicts.sort(key=lambda r: (r.start_time, r.end_time))
	return conflicts
