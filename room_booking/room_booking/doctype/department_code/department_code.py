# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Department Code DocType

Shared codes that let a department book and cancel rooms without a user
account. Codes are compared trimmed and case-insensitively.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from room_booking.room_booking.scheduling.authorization import normalize_department_code


class DepartmentCode(Document):
	def validate(self) -> None:
		self.code = (self.code or "").strip()
		if not self.code:
			frappe.throw(_("Code is required"))

		self.department_name = (self.department_name or "").strip()
		self._validate_unique_code()

	def _validate_unique_code(self) -> None:
		"""
		Evita códigos que solo difieren en mayúsculas/espacios.

		"IT" e " it " autorizan lo mismo, así que no pueden coexistir.
		"""
		wanted = normalize_department_code(self.code)
		others = frappe.get_all(
			"Department Code",
			filters={"name": ["!=", self.name or ""]},
			pluck="code"
		)

		for other in others:
			if normalize_department_code(other) == wanted:
				frappe.throw(
					_("Department Code {0} already exists").format(frappe.bold(other)),
					frappe.DuplicateEntryError
				)
