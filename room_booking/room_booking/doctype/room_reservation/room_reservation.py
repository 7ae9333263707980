# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Room Reservation DocType

A booking of a Meeting Room for a wall-clock interval on one date.
Admission happens here, under the room lock, inside the insert transaction.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import now_datetime

from room_booking.install import MANAGER_ROLE
from room_booking.room_booking.scheduling import lifecycle, messages, store
from room_booking.room_booking.scheduling.errors import (
	InvalidTransition,
	MissingCredential,
	SlotUnavailable,
	WrongDepartmentCode,
)
from room_booking.room_booking.scheduling.models import BookingChannel, Reservation, ReservationStatus
from room_booking.room_booking.scheduling.settings import get_booking_policy, local_now


class RoomReservation(Document):
	"""
	Room Reservation con admisión atómica por sala.

	Flujo:
	1. Nueva reserva -> se bloquea la sala (FOR UPDATE), se leen las reservas
	   confirmadas del día y se valida; si pasa, queda Confirmed
	2. Cambio de sala/fecha/horario -> misma validación excluyendo la propia reserva
	3. Cancelación -> soft delete vía store.cancel_reservation o save() con
	   status Cancelled; ambos pasan por lifecycle.cancel (nunca se borra)
	"""

	def validate(self) -> None:
		"""
		Validación antes de guardar.

		Ejecuta:
		1. Validar campos requeridos
		2. Resolver la identidad del dueño según booking_channel
		3. Validar la transición de status
		4. Admitir (nueva) o re-validar el horario (edición)
		"""
		self._validate_required_fields()
		self._resolve_ownership()
		self._validate_status_transition()

		if self.is_new():
			self._admit()
		elif self._schedule_changed() and not self.flags.schedule_validated:
			self._revalidate_schedule()

	def after_insert(self) -> None:
		frappe.logger("room_booking").info(
			f"Reservation admitted: {self.name} "
			f"(Room: {self.room}, Date: {self.date}, {self.start_time}-{self.end_time}, "
			f"Channel: {self.booking_channel})"
		)

	def on_trash(self) -> None:
		"""Las reservas solo se cancelan (soft delete)."""
		frappe.throw(
			_("Reservations cannot be deleted. Cancel the reservation instead."),
			frappe.PermissionError
		)

	# ===== VALIDATION METHODS =====

	def _validate_required_fields(self) -> None:
		if not self.room:
			frappe.throw(_("Room is required"))

		if not self.date or not self.start_time or not self.end_time:
			frappe.throw(_("Date, Start Time and End Time are required"))

		if not (self.title or "").strip():
			frappe.throw(_("Title is required"))

	def _resolve_ownership(self) -> None:
		"""
		Completa los campos de identidad del dueño.

		- User: booked_by por defecto es el usuario de la sesión (si no es Guest)
		- Department Code: el código debe existir y estar activo; se guarda la
		  forma registrada del código y el nombre del departamento
		"""
		if not self.is_new():
			return

		if not self.booking_channel:
			self.booking_channel = BookingChannel.USER.value

		if self.booking_channel == BookingChannel.DEPARTMENT_CODE.value:
			self._resolve_department_code()
			return

		if not self.booked_by and frappe.session.user != "Guest":
			self.booked_by = frappe.session.user

		if not self.booked_by:
			frappe.throw(
				_("Sign in or use a department code to book a room"),
				MissingCredential
			)

	def _resolve_department_code(self) -> None:
		if not (self.department_code or "").strip():
			frappe.throw(_("Department Code is required"), MissingCredential)

		match = store.find_department_code(self.department_code)
		if not match:
			frappe.throw(
				_("Department Code {0} is not valid or is inactive").format(
					frappe.bold(self.department_code.strip())
				),
				WrongDepartmentCode
			)

		self.department_code = match.code
		self.department_name = match.department_name

	def _validate_status_transition(self) -> None:
		"""
		Solo transiciones permitidas por el ciclo de vida.

		Una cancelación hecha con save() (desk, set_value, /api/resource) pasa
		por lifecycle.cancel con el usuario de la sesión: autorización, plazo
		mínimo y cancelled_at/cancelled_by igual que en store.cancel_reservation.
		"""
		if self.is_new():
			return

		before = self.get_doc_before_save()
		if not before or before.status == self.status:
			return

		if self.status == ReservationStatus.CANCELLED.value:
			self._cancel_as_session_user(before)
			return

		if not lifecycle.can_transition(ReservationStatus(before.status), ReservationStatus(self.status)):
			frappe.throw(
				_("Cannot change status from {0} to {1}").format(before.status, self.status),
				InvalidTransition
			)

	def _cancel_as_session_user(self, before: Document) -> None:
		user = frappe.session.user
		if user == "Guest":
			messages.throw_for(MissingCredential())

		is_manager = MANAGER_ROLE in frappe.get_roles(user)
		result = lifecycle.cancel(
			Reservation.from_doc(before),
			local_now(),
			user=None if is_manager else user,
			policy=get_booking_policy(include_hours=False),
			is_manager=is_manager
		)

		if not result.ok:
			messages.throw_for(result.error)

		self.cancelled_at = now_datetime()
		self.cancelled_by = user

		frappe.logger("room_booking").info(
			f"Reservation cancelled: {self.name} "
			f"(Room: {self.room}, Date: {self.date}, By: {'manager ' if is_manager else ''}{user})"
		)

	def _schedule_changed(self) -> bool:
		before = self.get_doc_before_save()
		if not before:
			return False

		# Normalizado: el form manda strings y la BD devuelve date/timedelta
		return lifecycle.schedule_changed(Reservation.from_doc(before), Reservation.from_doc(self))

	def _admit(self) -> None:
		"""
		Admisión de una reserva nueva.

		La sala queda bloqueada hasta el commit de la transacción del insert,
		así que dos reservas concurrentes de la misma sala se serializan.
		"""
		try:
			result = store.admit(self)
		except (frappe.QueryDeadlockError, frappe.QueryTimeoutError):
			self._throw_lost_race()

		if not result.ok:
			messages.throw_for(result.error, result.conflicts)

		self.status = result.reservation.status.value

	def _revalidate_schedule(self) -> None:
		"""Un cambio de sala/fecha/horario se valida igual que una creación."""
		if self.status == ReservationStatus.CANCELLED.value:
			frappe.throw(
				_("A cancelled reservation cannot be rescheduled"),
				InvalidTransition
			)

		try:
			verdict = store.check_schedule(self)
		except (frappe.QueryDeadlockError, frappe.QueryTimeoutError):
			self._throw_lost_race()

		if not verdict.ok:
			messages.throw_for(verdict.error, verdict.conflicts)

		frappe.logger("room_booking").info(
			f"Reservation rescheduled: {self.name} -> {self.room} {self.date} "
			f"{self.start_time}-{self.end_time}"
		)

	def _throw_lost_race(self) -> None:
		frappe.logger("room_booking").warning(
			f"Lock contention while booking {self.room} on {self.date}; reported as unavailable"
		)
		messages.throw_for(SlotUnavailable())
