"""
Core data shapes for the scheduling engine.

These are plain values built from Room Reservation documents (or literal
fixtures in tests). The engine never talks to the database itself.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Optional

from .utils import format_time, to_date, to_time


class ReservationStatus(str, Enum):
	PENDING = "Pending"
	CONFIRMED = "Confirmed"
	CANCELLED = "Cancelled"


class BookingChannel(str, Enum):
	USER = "User"
	DEPARTMENT_CODE = "Department Code"


@dataclass(frozen=True)
class Reservation:
	"""
	Single canonical reservation record.

	owner identity is polymorphic over the booking channel:
	- User channel -> booked_by (user id)
	- Department Code channel -> department_code
	"""

	name: Optional[str]
	room: str
	date: date
	start_time: time
	end_time: time
	status: ReservationStatus = ReservationStatus.CONFIRMED
	booking_channel: BookingChannel = BookingChannel.USER
	booked_by: Optional[str] = None
	department_code: Optional[str] = None
	title: str = ""
	creation: Optional[datetime] = None

	@property
	def owner_identity(self) -> Optional[str]:
		if self.booking_channel == BookingChannel.DEPARTMENT_CODE:
			return self.department_code
		return self.booked_by

	@property
	def is_confirmed(self) -> bool:
		return self.status == ReservationStatus.CONFIRMED

	@property
	def is_cancelled(self) -> bool:
		return self.status == ReservationStatus.CANCELLED

	def with_status(self, status: ReservationStatus) -> "Reservation":
		return replace(self, status=status)

	@classmethod
	def from_doc(cls, doc: Any) -> "Reservation":
		"""
		Construye una Reservation desde un doc de Room Reservation o un dict
		devuelto por frappe.get_all.
		"""
		get = doc.get
		return cls(
			name=get("name"),
			room=get("room"),
			date=to_date(get("date")),
			start_time=to_time(get("start_time")),
			end_time=to_time(get("end_time")),
			status=ReservationStatus(get("status") or ReservationStatus.CONFIRMED.value),
			booking_channel=BookingChannel(get("booking_channel") or BookingChannel.USER.value),
			booked_by=get("booked_by") or None,
			department_code=get("department_code") or None,
			title=get("title") or "",
			creation=get("creation") or None,
		)


@dataclass(frozen=True)
class ProposedBooking:
	room: str
	date: date
	start_time: time
	end_time: time


@dataclass
class TimeSlot:
	"""Candidate interval [time, end) with its availability annotation."""

	time: time
	end: time
	available: bool = True
	booking: Optional[Reservation] = None
	is_past: bool = False

	def as_dict(self) -> Dict[str, Any]:
		return {
			"time": format_time(self.time),
			"end": format_time(self.end),
			"available": self.available,
			"is_past": self.is_past,
			"booking": self.booking.name if self.booking else None,
			"booking_title": self.booking.title if self.booking else None,
		}


@dataclass(frozen=True)
class OperatingHours:
	"""Horario de operación de un tipo de día. enabled=False => día cerrado."""

	start: time
	end: time
	enabled: bool = True


@dataclass(frozen=True)
class BookingPolicy:
	"""
	Políticas opcionales leídas de Room Booking Settings.

	None en un campo significa "no se aplica".
	"""

	booking_advance_days: Optional[int] = None
	cancellation_lead_hours: Optional[int] = None
	operating_hours: Optional[Dict[str, OperatingHours]] = field(default=None)

	def hours_for(self, target_date: date) -> Optional[OperatingHours]:
		"""Devuelve el horario aplicable a la fecha (weekdays/saturday/sunday)."""
		if not self.operating_hours:
			return None
		return self.operating_hours.get(day_type(target_date))


def day_type(target_date: date) -> str:
	weekday = target_date.weekday()
	if weekday == 5:
		return "saturday"
	if weekday == 6:
		return "sunday"
	return "weekdays"
