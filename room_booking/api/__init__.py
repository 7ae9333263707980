"""
Room Booking API

Structure:
    api/
    ├── __init__.py              # This file
    ├── reservations/            # Reservations domain
    │   └── __init__.py          # Re-exports from reservation_api
    ├── shared/                  # Shared utilities
    │   ├── __init__.py
    │   ├── security.py          # Rate limiting, honeypot, sanitization
    │   └── validators.py        # Input format validators
    └── reservation_api.py       # Endpoints

Usage:
    frappe.call("room_booking.api.reservations.get_available_slots", ...)
"""

from . import reservations
from . import shared

__all__ = [
    "reservations",
    "shared",
]
