"""
Availability resolver — the only place the slot registry and the booking
ledger are combined.

Public API:
  resolve_free_slots(date, exclude_booking_id=None, offered=None)
  resolve_bookable_dates(horizon_days, today=None)

The two reads behind resolve_free_slots are separate queries with no lock
held until the booking is written, so two members can still race for the
same slot. Exclusivity is best-effort.
"""
from datetime import timedelta

from django.utils import timezone

from apps.slots import registry
from . import ledger
from .models import ACTIVE_STATUSES


def occupied_times(day, exclude_booking_id=None) -> set:
    """Time labels held by pending/confirmed bookings on `day`."""
    bookings = ledger.list_by_date_status(day, ACTIVE_STATUSES)
    return {
        b.time for b in bookings
        if exclude_booking_id is None or str(b.pk) != str(exclude_booking_id)
    }


def resolve_free_slots(day, exclude_booking_id=None, offered=None) -> list:
    """
    Registry slots for `day` minus the ones already taken, ascending.

    exclude_booking_id lets a booking being edited keep its own slot.
    Pass `offered` when the registry set for `day` is already loaded.
    """
    if offered is None:
        offered = registry.get_slots(day)
    if not offered:
        return []
    taken = occupied_times(day, exclude_booking_id)
    return [label for label in offered if label not in taken]


def resolve_bookable_dates(horizon_days: int, today=None) -> set:
    """
    ISO dates in [today, today + horizon_days] with at least one slot
    configured. A fully booked date still counts; it just resolves to no
    free times once opened.
    """
    today = registry.as_date(today) if today is not None else timezone.localdate()
    last = today + timedelta(days=horizon_days)
    return {d.isoformat() for d in registry.configured_dates(today, last)}
