"""
Time helpers shared by the scheduling core.

Frappe returns Time fields as timedelta (from midnight) when read from the
database and as strings when coming from a request, so everything is
normalized to datetime.time / datetime.date before comparing.
"""

from datetime import date, datetime, time, timedelta
from typing import Union

from frappe.utils import get_time, getdate


def to_time(time_value: Union[time, timedelta, str, datetime]) -> time:
	"""
	Convierte diferentes formatos de tiempo a datetime.time.

	Args:
		time_value: time, timedelta (desde medianoche), datetime o string "HH:MM[:SS]"

	Returns:
		datetime.time object
	"""
	if isinstance(time_value, datetime):
		return time_value.time()
	elif isinstance(time_value, time):
		return time_value
	elif isinstance(time_value, timedelta):
		# timedelta representa tiempo desde medianoche
		return (datetime.min + time_value).time()
	elif isinstance(time_value, str):
		return get_time(time_value)
	else:
		raise ValueError(f"Cannot convert {type(time_value)} to time")


def to_date(date_value: Union[date, datetime, str]) -> date:
	"""Convierte date, datetime o string YYYY-MM-DD a datetime.date."""
	if isinstance(date_value, datetime):
		return date_value.date()
	if isinstance(date_value, date):
		return date_value
	if isinstance(date_value, str) and date_value.strip():
		return getdate(date_value.strip())
	raise ValueError(f"Cannot convert {date_value!r} to date")


def minutes_of(value: time) -> int:
	"""Minutos desde medianoche (se descartan los segundos)."""
	return value.hour * 60 + value.minute


def format_time(value: time) -> str:
	return value.strftime("%H:%M")
