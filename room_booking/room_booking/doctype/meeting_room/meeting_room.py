# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint


class MeetingRoom(Document):
	def validate(self) -> None:
		self.room_name = (self.room_name or "").strip()
		if not self.room_name:
			frappe.throw(_("Room Name is required"))

		if cint(self.capacity) <= 0:
			frappe.throw(_("Capacity must be greater than zero"))

		self.amenities = "\n".join(self.get_amenities())

	def get_amenities(self) -> list:
		"""Lista de amenities (una por línea, sin vacías)."""
		return [line.strip() for line in (self.amenities or "").splitlines() if line.strip()]
