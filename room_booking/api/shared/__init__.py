"""
Shared utilities for the Room Booking API.
"""

from .security import (
    clean_text,
    reject_bot_submission,
)
from .validators import (
    clean_docname,
    parse_booking_date,
    parse_booking_time,
    validate_status,
)

__all__ = [
    "clean_docname",
    "clean_text",
    "parse_booking_date",
    "parse_booking_time",
    "reject_bot_submission",
    "validate_status",
]
