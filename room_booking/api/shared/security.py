"""
Abuse guards for the guest booking form.

Request throttling is Frappe's own ``frappe.rate_limiter.rate_limit``
(per IP, counted in Redis), applied on each endpoint. What it does not
cover lives here: the hidden honeypot field of the booking form and the
clean-up of the free text guests type in.
"""

import frappe
from frappe import _
from frappe.utils import cstr, strip_html


def reject_bot_submission(honeypot: str = None) -> None:
    """
    The booking form ships a hidden field that people never fill in.

    Raises:
        frappe.ValidationError: generic, so the check is not revealed
    """
    if not honeypot:
        return

    frappe.log_error(
        title=_("Room Booking: honeypot filled"),
        message=(
            f"IP: {getattr(frappe.local, 'request_ip', None) or 'n/a'}, "
            f"value: {cstr(honeypot)[:100]}"
        )
    )
    frappe.throw(_("Invalid request"), frappe.ValidationError)


def clean_text(value: str, max_length: int = 140) -> str:
    """
    Titles, descriptions, contact data and department codes from a guest:
    HTML stripped, trimmed and cut to the column size.

    Returns:
        str | None: None when nothing is left
    """
    text = strip_html(cstr(value)).strip()[:max_length]
    return text or None
