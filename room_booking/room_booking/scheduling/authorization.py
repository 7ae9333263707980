"""
Cancellation/Edit Authorizer

Decides whether an actor may mutate a reservation. Two mutually exclusive
modes, picked by the credential presented:
- owner mode: the caller's user id
- department-code mode: a department code typed by the caller
"""

from dataclasses import dataclass
from typing import Optional

from frappe.utils import cstr

from .errors import (
	AuthorizationDenied,
	MissingOwnershipData,
	WrongDepartmentCode,
	WrongOwner,
)
from .models import Reservation


@dataclass
class AuthorizationVerdict:
	error: Optional[AuthorizationDenied] = None

	@property
	def authorized(self) -> bool:
		return self.error is None

	@property
	def error_type(self) -> Optional[str]:
		return type(self.error).__name__ if self.error else None


def normalize_department_code(code: Optional[str]) -> str:
	"""Trim + case-fold: " it " y "IT" son el mismo código."""
	return cstr(code).strip().casefold()


def authorize_mutation(
	reservation: Reservation,
	user: Optional[str] = None,
	department_code: Optional[str] = None
) -> AuthorizationVerdict:
	"""
	Autoriza cancelar/editar una reserva.

	Args:
		reservation: reserva a modificar
		user: identidad del usuario (modo owner)
		department_code: código presentado (modo department-code)

	Returns:
		AuthorizationVerdict con error WrongOwner, WrongDepartmentCode o
		MissingOwnershipData si se deniega.

	Raises:
		TypeError: si se presentan ambas credenciales o ninguna
	"""
	if (user is None) == (department_code is None):
		raise TypeError("Present exactly one credential: user or department_code")

	if user is not None:
		return _authorize_owner(reservation, user)

	return _authorize_department_code(reservation, department_code)


def _authorize_owner(reservation: Reservation, user: str) -> AuthorizationVerdict:
	if not reservation.booked_by or cstr(user).strip() != reservation.booked_by:
		return AuthorizationVerdict(error=WrongOwner())
	return AuthorizationVerdict()


def _authorize_department_code(reservation: Reservation, department_code: str) -> AuthorizationVerdict:
	stored = normalize_department_code(reservation.department_code)

	# Sin código utilizable en la reserva: falla cerrada, nunca se concede
	if not stored:
		return AuthorizationVerdict(error=MissingOwnershipData())

	if normalize_department_code(department_code) != stored:
		return AuthorizationVerdict(error=WrongDepartmentCode())

	return AuthorizationVerdict()
