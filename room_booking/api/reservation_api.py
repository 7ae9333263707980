"""
Reservation API Endpoints

Whitelisted functions for frontend/external use.
Guest endpoints are protected with:
- frappe.rate_limiter.rate_limit (per IP, Redis)
- Honeypot validation for bot detection
- Input parsing and clean-up of free text

Booking errors (SlotUnavailable, WrongDepartmentCode, ...) propagate with
their own exception class so clients can branch on exc_type.
"""

import frappe
from frappe import _
from frappe.rate_limiter import rate_limit
from frappe.utils import getdate
from typing import Dict, List, Any, Optional, Tuple

from room_booking.room_booking.scheduling import messages, store
from room_booking.room_booking.scheduling.errors import MissingCredential, SlotUnavailable
from room_booking.room_booking.scheduling.models import BookingChannel, ProposedBooking
from room_booking.room_booking.scheduling.settings import (
	get_booking_policy,
	get_settings,
	get_slot_duration,
	get_timezone_name,
	local_now,
)
from room_booking.room_booking.scheduling.utils import format_time, to_time
from room_booking.room_booking.scheduling.validation import check_booking

from room_booking.api.shared import (
	clean_docname,
	clean_text,
	parse_booking_date,
	parse_booking_time,
	reject_bot_submission,
	validate_status,
)


MANAGER_ROLE = "Room Booking Manager"

RESERVATION_SUMMARY_FIELDS = [
	"name",
	"title",
	"room",
	"date",
	"start_time",
	"end_time",
	"status",
	"booking_channel",
	"department_name",
	"contact_name",
	"creation",
]

PUBLIC_RESERVATION_FIELDS = [
	"name",
	"title",
	"room",
	"date",
	"start_time",
	"end_time",
	"status",
	"booking_channel",
	"department_name",
]


@frappe.whitelist(allow_guest=True, methods=['GET'])
@rate_limit(limit=30, seconds=60)
def get_active_rooms() -> List[Dict[str, Any]]:
	"""
	Obtiene las salas activas disponibles para reservar.

	Rate limited: 30 requests per minute per IP.

	Returns:
		List[Dict]: salas activas

	Example Response:
		```json
		[
			{
				"name": "Sala Andes",
				"room_name": "Sala Andes",
				"capacity": 8,
				"amenities": ["Projector", "Whiteboard"],
				"description": "...",
				"color": "#3b82f6"
			}
		]
		```
	"""
	try:
		rooms = frappe.get_all(
			store.ROOM_DOCTYPE,
			filters={"is_active": 1},
			fields=["name", "room_name", "capacity", "amenities", "description", "color"],
			order_by="room_name asc"
		)

		for room in rooms:
			room.amenities = [
				line.strip() for line in (room.amenities or "").splitlines() if line.strip()
			]

		return rooms

	except Exception as e:
		frappe.log_error(f"Error getting active rooms: {str(e)}", "API Error")
		frappe.throw(_("Error while loading rooms"))


@frappe.whitelist(allow_guest=True, methods=['GET'])
@rate_limit(limit=30, seconds=60)
def get_available_slots(room: str, date: str) -> Dict[str, Any]:
	"""
	Slots del día para una sala, anotados con disponibilidad.

	Rate limited: 30 requests per minute per IP.

	Args:
		room: nombre del Meeting Room
		date: fecha (YYYY-MM-DD)

	Returns:
		dict: {
			"room": str,
			"date": "2024-06-10",
			"slot_duration_minutes": 30,
			"timezone": "America/Bogota",
			"slots": [
				{"time": "09:00", "end": "09:30", "available": False,
				 "is_past": False, "booking": "RR-2024-00001", "booking_title": "Standup"},
				...
			]
		}

	Example:
		```javascript
		frappe.call({
			method: "room_booking.api.reservations.get_available_slots",
			args: {room: "Sala Andes", date: "2024-06-10"},
			callback: function(r) {
				console.log(r.message.slots);
			}
		});
		```
	"""
	room = clean_docname(room, "room")
	target_date = parse_booking_date(date, "date")
	_ensure_room_exists(room)

	try:
		settings = get_settings()
		slots = store.get_room_availability(room, target_date)

		return {
			"room": room,
			"date": str(target_date),
			"slot_duration_minutes": get_slot_duration(settings),
			"timezone": get_timezone_name(settings),
			"slots": [slot.as_dict() for slot in slots],
		}

	except Exception as e:
		frappe.log_error(f"Error in get_available_slots: {str(e)}", "API Error")
		frappe.throw(_("Error while loading available slots"))


@frappe.whitelist(allow_guest=True, methods=['GET', 'POST'])
@rate_limit(limit=20, seconds=60)
def validate_reservation(
	room: str,
	date: str,
	start_time: str,
	end_time: str,
	reservation_name: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Valida una reserva ANTES de guardarla (sin efectos).

	La respuesta es orientativa: la admisión real se vuelve a validar bajo
	el lock de la sala al crear.

	Rate limited: 20 requests per minute per IP.

	Returns:
		dict: {
			"valid": bool,
			"errors": list[str],
			"error_type": str | None,
			"conflicts": [{"name", "title", "start_time", "end_time"}]
		}
	"""
	room = clean_docname(room, "room")
	target_date = parse_booking_date(date, "date")
	start_time = parse_booking_time(start_time, "start_time")
	end_time = parse_booking_time(end_time, "end_time")
	if reservation_name:
		reservation_name = clean_docname(reservation_name, "reservation_name")

	_ensure_room_exists(room)

	try:
		if not frappe.db.get_value(store.ROOM_DOCTYPE, room, "is_active"):
			return {
				"valid": False,
				"errors": [_("Room {0} is not available for booking").format(room)],
				"error_type": "SlotUnavailable",
				"conflicts": []
			}

		verdict = check_booking(
			ProposedBooking(
				room=room,
				date=target_date,
				start_time=to_time(start_time),
				end_time=to_time(end_time)
			),
			store.get_confirmed_reservations(room, target_date, exclude_reservation=reservation_name),
			local_now(),
			exclude_reservation=reservation_name,
			policy=get_booking_policy()
		)

		return {
			"valid": verdict.ok,
			"errors": [] if verdict.ok else [messages.describe(verdict.error, verdict.conflicts)],
			"error_type": verdict.error_type,
			"conflicts": [
				{
					"name": conflict.name,
					"title": conflict.title,
					"start_time": format_time(conflict.start_time),
					"end_time": format_time(conflict.end_time),
				}
				for conflict in verdict.conflicts
			]
		}

	except Exception as e:
		frappe.log_error(f"Error in validate_reservation: {str(e)}", "API Error")
		return {
			"valid": False,
			"errors": [_("Error while validating the reservation")],
			"error_type": None,
			"conflicts": []
		}


@frappe.whitelist(allow_guest=True, methods=['POST'])
@rate_limit(limit=5, seconds=60)
def create_reservation(
	room: str,
	date: str,
	start_time: str,
	end_time: str,
	title: str,
	description: Optional[str] = None,
	contact_name: Optional[str] = None,
	contact_email: Optional[str] = None,
	contact_phone: Optional[str] = None,
	department_code: Optional[str] = None,
	honeypot: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Crea una reserva confirmada.

	- Con department_code: canal "Department Code" (también para invitados)
	- Sin department_code: canal "User", requiere sesión iniciada

	La admisión (lock de la sala + validación) ocurre en
	RoomReservation.validate dentro de la transacción del insert.

	Rate limited: 5 requests per minute per IP (write operation).
	Protected by honeypot field.

	Returns:
		dict: resumen de la reserva creada

	Example:
		```javascript
		frappe.call({
			method: "room_booking.api.reservations.create_reservation",
			args: {
				room: "Sala Andes",
				date: "2024-06-10",
				start_time: "10:30",
				end_time: "11:30",
				title: "Planning",
				department_code: "IT"
			}
		});
		```
	"""
	reject_bot_submission(honeypot)
	room = clean_docname(room, "room")
	date = parse_booking_date(date, "date")
	start_time = parse_booking_time(start_time, "start_time")
	end_time = parse_booking_time(end_time, "end_time")
	title = clean_text(title, 140)
	if not title:
		frappe.throw(_("Title is required"), frappe.ValidationError)

	department_code = clean_text(department_code, 140)
	_ensure_room_exists(room)

	if department_code:
		channel = BookingChannel.DEPARTMENT_CODE.value
	elif frappe.session.user != "Guest":
		channel = BookingChannel.USER.value
	else:
		frappe.throw(
			_("Sign in or use a department code to book a room"),
			MissingCredential
		)

	try:
		reservation = frappe.get_doc({
			"doctype": store.RESERVATION_DOCTYPE,
			"room": room,
			"date": date,
			"start_time": start_time,
			"end_time": end_time,
			"title": title,
			"description": clean_text(description, 2000) or "",
			"booking_channel": channel,
			"booked_by": frappe.session.user if channel == BookingChannel.USER.value else None,
			"department_code": department_code,
			"contact_name": clean_text(contact_name, 140),
			"contact_email": clean_text(contact_email, 140),
			"contact_phone": clean_text(contact_phone, 40),
		})
		reservation.insert(ignore_permissions=True)

		# Libera el lock de la sala cuanto antes
		frappe.db.commit()

		return _summary(reservation)

	except (frappe.ValidationError, frappe.PermissionError):
		raise

	except Exception as e:
		frappe.log_error(f"Error in create_reservation: {str(e)}", "API Error")
		frappe.throw(_("Error while creating the reservation"))


@frappe.whitelist(allow_guest=True, methods=['POST'])
@rate_limit(limit=10, seconds=60)
def update_reservation(
	reservation_name: str,
	room: Optional[str] = None,
	date: Optional[str] = None,
	start_time: Optional[str] = None,
	end_time: Optional[str] = None,
	title: Optional[str] = None,
	description: Optional[str] = None,
	department_code: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Edita una reserva. Requiere ser el dueño, presentar el código de
	departamento correcto o ser Room Booking Manager.

	Cualquier cambio de sala/fecha/horario se re-valida como una creación.

	Rate limited: 10 requests per minute per IP.
	"""
	reservation_name = clean_docname(reservation_name, "reservation_name")
	if room:
		room = clean_docname(room, "room")
		_ensure_room_exists(room)
	if date:
		date = parse_booking_date(date, "date")
	if start_time:
		start_time = parse_booking_time(start_time, "start_time")
	if end_time:
		end_time = parse_booking_time(end_time, "end_time")

	_ensure_reservation_exists(reservation_name)
	user, department_code, is_manager = _resolve_actor(department_code)

	try:
		result = store.update_reservation_schedule(
			reservation_name,
			room=room,
			target_date=date,
			start_time=start_time,
			end_time=end_time,
			user=user,
			department_code=department_code,
			is_manager=is_manager
		)
	except (frappe.QueryDeadlockError, frappe.QueryTimeoutError):
		frappe.logger("room_booking").warning(
			f"Lock contention while rescheduling {reservation_name}; reported as unavailable"
		)
		messages.throw_for(SlotUnavailable())

	if not result.ok:
		messages.throw_for(result.error, result.conflicts)

	try:
		reservation = frappe.get_doc(store.RESERVATION_DOCTYPE, reservation_name)

		details = {}
		if title is not None:
			details["title"] = clean_text(title, 140)
		if description is not None:
			details["description"] = clean_text(description, 2000) or ""

		if details:
			reservation.update(details)
			reservation.save(ignore_permissions=True)

		frappe.db.commit()

		return _summary(reservation)

	except (frappe.ValidationError, frappe.PermissionError):
		raise

	except Exception as e:
		frappe.log_error(f"Error in update_reservation: {str(e)}", "API Error")
		frappe.throw(_("Error while updating the reservation"))


@frappe.whitelist(allow_guest=True, methods=['POST'])
@rate_limit(limit=10, seconds=60)
def cancel_reservation(reservation_name: str, department_code: Optional[str] = None) -> Dict[str, Any]:
	"""
	Cancela una reserva (soft delete). Idempotente.

	Requiere ser el dueño, presentar el código de departamento correcto o
	ser Room Booking Manager.

	Rate limited: 10 requests per minute per IP.

	Returns:
		dict: {
			"success": True,
			"changed": bool,       # False si ya estaba cancelada
			"status": "Cancelled",
			"message": str
		}
	"""
	reservation_name = clean_docname(reservation_name, "reservation_name")
	_ensure_reservation_exists(reservation_name)
	user, department_code, is_manager = _resolve_actor(department_code)

	result = store.cancel_reservation(
		reservation_name,
		user=user,
		department_code=department_code,
		is_manager=is_manager
	)

	if not result.ok:
		messages.throw_for(result.error)

	frappe.db.commit()

	return {
		"success": True,
		"changed": result.changed,
		"status": result.reservation.status.value,
		"message": (
			_("Reservation cancelled")
			if result.changed
			else _("The reservation was already cancelled")
		)
	}


@frappe.whitelist(methods=['GET'])
def get_my_reservations(status: Optional[str] = None) -> List[Dict[str, Any]]:
	"""
	Reservas del usuario de la sesión (canal User), más recientes primero.

	Args:
		status: filtrar por status (Pending, Confirmed, Cancelled)
	"""
	if frappe.session.user == "Guest":
		frappe.throw(_("Please sign in to see your reservations"), frappe.PermissionError)

	filters = {"booked_by": frappe.session.user}
	if status:
		filters["status"] = validate_status(status)

	try:
		reservations = frappe.get_all(
			store.RESERVATION_DOCTYPE,
			filters=filters,
			fields=RESERVATION_SUMMARY_FIELDS,
			order_by="date desc, start_time desc"
		)

		for reservation in reservations:
			reservation.start_time = format_time(to_time(reservation.start_time))
			reservation.end_time = format_time(to_time(reservation.end_time))

		return reservations

	except Exception as e:
		frappe.log_error(f"Error in get_my_reservations: {str(e)}", "API Error")
		frappe.throw(_("Error while loading your reservations"))


@frappe.whitelist(allow_guest=True, methods=['GET'])
@rate_limit(limit=30, seconds=60)
def get_reservations_for_date(
	date: str,
	status: Optional[str] = None,
	room: Optional[str] = None,
	search: Optional[str] = None
) -> List[Dict[str, Any]]:
	"""
	Tablero del día: todas las reservas de una fecha, de todas las salas.

	Rate limited: 30 requests per minute per IP.

	Args:
		date: fecha (YYYY-MM-DD)
		status: filtrar por status (Pending, Confirmed, Cancelled)
		room: limitar a una sala
		search: texto contenido en el título

	Returns:
		list[dict]: ordenadas por sala y hora de inicio. Sin datos de contacto
		ni código de departamento (la respuesta es pública).
	"""
	target_date = parse_booking_date(date, "date")

	filters = {"date": target_date}
	if status:
		filters["status"] = validate_status(status)
	if room:
		filters["room"] = clean_docname(room, "room")

	search = clean_text(search, 140)
	if search:
		filters["title"] = ["like", f"%{search}%"]

	try:
		reservations = frappe.get_all(
			store.RESERVATION_DOCTYPE,
			filters=filters,
			fields=PUBLIC_RESERVATION_FIELDS,
			order_by="room asc, start_time asc"
		)

		for reservation in reservations:
			reservation.date = str(getdate(reservation.date))
			reservation.start_time = format_time(to_time(reservation.start_time))
			reservation.end_time = format_time(to_time(reservation.end_time))

		return reservations

	except Exception as e:
		frappe.log_error(f"Error in get_reservations_for_date: {str(e)}", "API Error")
		frappe.throw(_("Error while loading the reservations of the day"))


# ===== HELPERS =====

def _ensure_room_exists(room: str) -> None:
	if not frappe.db.exists(store.ROOM_DOCTYPE, room):
		frappe.throw(_("Room {0} does not exist").format(room), frappe.DoesNotExistError)


def _ensure_reservation_exists(reservation_name: str) -> None:
	if not frappe.db.exists(store.RESERVATION_DOCTYPE, reservation_name):
		frappe.throw(
			_("Reservation {0} does not exist").format(reservation_name),
			frappe.DoesNotExistError
		)


def _resolve_actor(department_code: Optional[str]) -> Tuple[Optional[str], Optional[str], bool]:
	"""
	Decide qué credencial presenta el llamador.

	Returns:
		(user, department_code, is_manager): exactamente una credencial,
		o ninguna si es Room Booking Manager
	"""
	user = frappe.session.user

	if user != "Guest" and MANAGER_ROLE in frappe.get_roles(user):
		return None, None, True

	department_code = clean_text(department_code, 140)
	if department_code:
		return None, department_code, False

	if user != "Guest":
		return user, None, False

	frappe.throw(
		_("Sign in or present the reservation's department code"),
		MissingCredential
	)


def _summary(reservation: Any) -> Dict[str, Any]:
	return {
		"name": reservation.name,
		"title": reservation.title,
		"room": reservation.room,
		"date": str(getdate(reservation.date)),
		"start_time": format_time(to_time(reservation.start_time)),
		"end_time": format_time(to_time(reservation.end_time)),
		"status": reservation.status,
		"booking_channel": reservation.booking_channel,
		"department_name": reservation.department_name,
	}
