"""
Slot availability registry — which half-hour labels are offered per date.

Public API:
  universe_of_labels(start_hour=9, end_hour=23)
  get_slots(date)
  set_slots(date, slots)
  configured_dates(start, end)

Labels are zero-padded "HH:MM" strings, so sorting them as strings is the
same as sorting them by time of day.
"""
import logging
import re
from datetime import date as date_type, datetime

from django.conf import settings
from django.db import DatabaseError

from apps.core.exceptions import StoreUnavailable, ValidationError
from .models import DailySlotSet

logger = logging.getLogger(__name__)

LABEL_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


# ── Helpers ───────────────────────────────────────────────────────────────────

def as_date(value) -> date_type:
    """Accept a date or a 'YYYY-MM-DD' string. Raises ValidationError otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid date "{value}". Expected YYYY-MM-DD.', field='date')


def is_valid_label(value) -> bool:
    return isinstance(value, str) and bool(LABEL_RE.match(value))


def universe_of_labels(start_hour: int = 9, end_hour: int = 23) -> list:
    """Every HH:00 and HH:30 label in [start_hour, end_hour)."""
    labels = []
    for hour in range(start_hour, end_hour):
        labels.append(f"{hour:02d}:00")
        labels.append(f"{hour:02d}:30")
    return labels


def configured_universe() -> list:
    return universe_of_labels(settings.SLOT_START_HOUR, settings.SLOT_END_HOUR)


# ── Registry ──────────────────────────────────────────────────────────────────

def _labels(row) -> list:
    """Valid labels stored on `row`, sorted and de-duplicated."""
    slots = row.slots
    if not isinstance(slots, list):
        logger.warning('Slot set for %s is not a list: %r', row.date, slots)
        return []
    labels = sorted({s for s in slots if is_valid_label(s)})
    if len(labels) != len(slots):
        dropped = [s for s in slots if not is_valid_label(s)]
        if dropped:
            logger.warning('Slot set for %s holds malformed labels: %r', row.date, dropped)
    return labels


def get_slots(day) -> list:
    """
    Sorted labels offered on `day`.
    Unconfigured dates and malformed rows both come back as []; entries
    that are not HH:MM labels are dropped.
    """
    day = as_date(day)
    try:
        row = DailySlotSet.objects.filter(date=day).first()
    except DatabaseError as exc:
        logger.exception('Failed to load slots for %s', day)
        raise StoreUnavailable() from exc

    if row is None:
        return []
    return _labels(row)


def set_slots(day, slots) -> list:
    """
    Replace the whole set for `day`. No merging: pass the full desired set.
    Returns the stored (sorted, de-duplicated) labels.
    """
    day = as_date(day)
    universe = set(configured_universe())
    unique = set(slots or [])
    invalid = sorted(str(s) for s in unique if s not in universe)
    if invalid:
        raise ValidationError(
            f'Not a bookable half-hour label: {", ".join(invalid)}.',
            field='slots',
        )
    cleaned = sorted(unique)

    try:
        DailySlotSet.objects.update_or_create(date=day, defaults={'slots': cleaned})
    except DatabaseError as exc:
        logger.exception('Failed to save slots for %s', day)
        raise StoreUnavailable() from exc

    logger.info('Slots for %s set to %s', day, cleaned)
    return cleaned


def configured_dates(start, end) -> list:
    """Dates in [start, end] that offer at least one slot, ascending."""
    start, end = as_date(start), as_date(end)
    try:
        rows = list(
            DailySlotSet.objects
            .filter(date__gte=start, date__lte=end)
            .order_by('date')
        )
    except DatabaseError as exc:
        logger.exception('Failed to load configured dates %s..%s', start, end)
        raise StoreUnavailable() from exc

    return [row.date for row in rows if _labels(row)]
