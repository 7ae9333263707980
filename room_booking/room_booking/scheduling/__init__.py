"""
Scheduling Services Module

Core business logic for room reservations:
- Slot generation (slots.py)
- Availability annotation (availability.py)
- Overlap detection (overlap.py)
- Booking validation (validation.py)
- Cancellation/edit authorization (authorization.py)
- Reservation lifecycle (lifecycle.py)
- Frappe-backed reads and atomic admission (store.py)
- Settings reader (settings.py)
"""
