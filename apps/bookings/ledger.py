"""
Booking ledger — storage of booking records, no HTTP/request awareness.

Public API:
  create_booking(draft)
  update_booking(booking_id, patch)
  delete_booking(booking_id)
  get_booking(booking_id)
  list_by_user(user_id)
  list_all()
  list_by_date_status(date, statuses)
  list_upcoming(user_id, today)
  search(term)

The ledger validates record shape (required fields, formats, closed
bookings keeping their date/time) but does NOT check slot conflicts: that
is the resolver's job at write time.
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.db.models import Q

from apps.accounts.models import Member
from apps.core.exceptions import NotFoundError, StoreUnavailable, ValidationError
from apps.slots.registry import as_date, is_valid_label
from .models import Booking, BookingStatus, ACTIVE_STATUSES, CLOSED_STATUSES

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    'user', 'user_name', 'user_phone', 'host', 'host_name', 'location',
    'date', 'time', 'status', 'title', 'notes',
})
REQUIRED_FIELDS = ('user', 'date', 'time', 'status')
TEXT_FIELDS = ('user_name', 'user_phone', 'host_name', 'location', 'title', 'notes')


# ── Record mapping / validation ───────────────────────────────────────────────

def _member(value, field):
    if isinstance(value, Member):
        return value
    try:
        return Member.objects.get(pk=value)
    except (Member.DoesNotExist, ValueError, DjangoValidationError):
        raise ValidationError(f'Unknown member for "{field}".', field=field)


def _clean(values: dict) -> dict:
    """
    Map raw input to model-ready values. Fails closed: anything missing or
    malformed raises ValidationError instead of reaching the table.
    """
    data = {}
    for field, value in values.items():
        if field == 'user':
            if value in (None, ''):
                raise ValidationError('Booking owner is required.', field='user')
            data['user'] = _member(value, 'user')
        elif field == 'host':
            data['host'] = None if value in (None, '') else _member(value, 'host')
        elif field == 'date':
            if value in (None, ''):
                raise ValidationError('Date is required.', field='date')
            data['date'] = as_date(value)
        elif field == 'time':
            if not is_valid_label(value):
                raise ValidationError('Time is required as HH:MM.', field='time')
            data['time'] = value
        elif field == 'status':
            if value not in BookingStatus.values:
                raise ValidationError('A valid status is required.', field='status')
            data['status'] = value
        elif field in TEXT_FIELDS:
            data[field] = '' if value is None else str(value).strip()
    return data


def _get(booking_id) -> Booking:
    try:
        return Booking.objects.select_related('user', 'host').get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError('Booking not found.')


def _query(description, build):
    """Evaluate a queryset, turning database failures into StoreUnavailable."""
    try:
        return list(build())
    except DatabaseError as exc:
        logger.exception('Failed to %s', description)
        raise StoreUnavailable() from exc


# ── Writes ────────────────────────────────────────────────────────────────────

def create_booking(draft: dict) -> Booking:
    """
    Create a booking from a draft dict.
    created_at is stamped now; updated_at stays empty until the first edit.
    """
    unknown = set(draft) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f'Unknown booking fields: {", ".join(sorted(unknown))}.')
    for field in REQUIRED_FIELDS:
        if draft.get(field) in (None, ''):
            raise ValidationError(f'Booking {field} is required.', field=field)

    try:
        data = _clean(draft)
        booking = Booking(**data)
        if not booking.user_name:
            booking.user_name = booking.user.display_name
        if booking.host is not None and not booking.host_name:
            booking.host_name = booking.host.display_name
        if not booking.location:
            booking.location = settings.DEFAULT_LOCATION
        booking.save()
    except DatabaseError as exc:
        logger.exception('Failed to create booking')
        raise StoreUnavailable() from exc

    logger.info('Booking %s created for %s on %s %s [%s]',
                booking.pk, booking.user_id, booking.date, booking.time, booking.status)
    return booking


def update_booking(booking_id, patch: dict) -> Booking:
    """
    Merge `patch` into the booking and stamp updated_at.
    Completed/cancelled bookings keep their date and time.
    """
    unknown = set(patch) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f'Unknown booking fields: {", ".join(sorted(unknown))}.')

    try:
        booking = _get(booking_id)
        data = _clean(patch)

        if booking.status in CLOSED_STATUSES:
            moved = (
                ('date' in data and data['date'] != booking.date) or
                ('time' in data and data['time'] != booking.time)
            )
            if moved:
                raise ValidationError(
                    f'A {booking.status} booking cannot change its date or time.',
                )

        for field, value in data.items():
            setattr(booking, field, value)
        if 'user' in data and 'user_name' not in data:
            booking.user_name = booking.user.display_name
        booking.touch()
        booking.save()
    except DatabaseError as exc:
        logger.exception('Failed to update booking %s', booking_id)
        raise StoreUnavailable() from exc

    logger.info('Booking %s updated (%s)', booking.pk, ', '.join(sorted(data)) or 'no fields')
    return booking


def delete_booking(booking_id) -> None:
    """Hard delete. NotFoundError when the booking is already gone."""
    try:
        booking = _get(booking_id)
        booking.delete()
    except DatabaseError as exc:
        logger.exception('Failed to delete booking %s', booking_id)
        raise StoreUnavailable() from exc
    logger.info('Booking %s deleted', booking_id)


# ── Reads ─────────────────────────────────────────────────────────────────────

def get_booking(booking_id) -> Booking:
    try:
        return _get(booking_id)
    except DatabaseError as exc:
        logger.exception('Failed to load booking %s', booking_id)
        raise StoreUnavailable() from exc


def list_by_user(user_id) -> list:
    """Owner's history, most recent slot first."""
    return _query(
        f'list bookings of {user_id}',
        lambda: Booking.objects.filter(user_id=user_id).order_by('-date', '-time'),
    )


def list_all() -> list:
    return _query(
        'list bookings',
        lambda: Booking.objects.select_related('user', 'host').order_by('-date', '-time'),
    )


def list_by_date_status(day, statuses) -> list:
    day = as_date(day)
    return _query(
        f'list bookings on {day}',
        lambda: Booking.objects.filter(date=day, status__in=list(statuses)).order_by('time'),
    )


def list_upcoming(user_id, today) -> list:
    """Owner's pending/confirmed bookings from `today` on, soonest first."""
    today = as_date(today)
    return _query(
        f'list upcoming bookings of {user_id}',
        lambda: (
            Booking.objects
            .filter(user_id=user_id, date__gte=today, status__in=ACTIVE_STATUSES)
            .order_by('date', 'time')
        ),
    )


def search(term: str) -> list:
    """Admin list filter on owner name, host name or title."""
    term = (term or '').strip()
    if not term:
        return list_all()
    return _query(
        f'search bookings for {term!r}',
        lambda: (
            Booking.objects
            .select_related('user', 'host')
            .filter(
                Q(user_name__icontains=term) |
                Q(host_name__icontains=term) |
                Q(title__icontains=term)
            )
            .order_by('-date', '-time')
        ),
    )
