"""
Reservations API Domain

Rooms, slot availability, validation and the reservation lifecycle
(create, edit, cancel), the signed-in user's reservations and the public
day board.
"""

from room_booking.api.reservation_api import (
    # Rooms
    get_active_rooms,
    get_available_slots,
    # Validation
    validate_reservation,
    # Lifecycle
    create_reservation,
    update_reservation,
    cancel_reservation,
    # User's reservations (authenticated)
    get_my_reservations,
    # Day board (public)
    get_reservations_for_date,
)

__all__ = [
    "get_active_rooms",
    "get_available_slots",
    "validate_reservation",
    "create_reservation",
    "update_reservation",
    "cancel_reservation",
    "get_my_reservations",
    "get_reservations_for_date",
]
