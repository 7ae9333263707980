"""
Booking Errors

Typed errors produced by the scheduling core. The core returns them inside
verdict objects; the DocType and API layers raise them through frappe.throw.

Scheduling errors are ValidationError subclasses and authorization errors are
PermissionError subclasses, so Frappe maps them to the right HTTP status.
"""

import frappe


class RoomBookingError(frappe.ValidationError):
	"""Base para todos los errores del motor de reservas."""
	pass


class SlotUnavailable(RoomBookingError):
	"""El intervalo se solapa con una reserva confirmada o ya pasó."""
	pass


class InvalidInterval(SlotUnavailable):
	"""start_time no es estrictamente menor que end_time."""
	pass


class OutsideBookingWindow(SlotUnavailable):
	"""La fecha está más allá de la ventana de reserva anticipada."""
	pass


class OutsideOperatingHours(SlotUnavailable):
	"""El intervalo cae fuera del horario de operación (o el día está cerrado)."""
	pass


class InvalidTransition(RoomBookingError):
	"""Transición de estado no permitida por el ciclo de vida."""
	pass


class CancellationWindowClosed(RoomBookingError):
	"""La cancelación llega después del plazo mínimo antes del inicio."""
	pass


class AuthorizationDenied(frappe.PermissionError):
	"""Base para las denegaciones del autorizador."""
	pass


class WrongOwner(AuthorizationDenied):
	pass


class WrongDepartmentCode(AuthorizationDenied):
	pass


class MissingOwnershipData(AuthorizationDenied):
	"""
	La reserva no tiene un código de departamento utilizable.

	Es una falla de integridad de datos: siempre se deniega.
	"""
	pass


class MissingCredential(AuthorizationDenied):
	"""El llamador no presentó sesión ni código de departamento."""
	pass
