"""
Dashboard statistics for members and admins.

Weeks run Sunday through Saturday.
"""
from datetime import timedelta

from django.db import DatabaseError
from django.utils import timezone

from apps.accounts.models import Member
from apps.core.exceptions import StoreUnavailable
from .models import Booking, BookingStatus


def week_bounds(today):
    """(sunday, saturday) of the week containing `today`."""
    # date.weekday(): Monday=0 ... Sunday=6
    sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    return sunday, sunday + timedelta(days=6)


def _moment(now):
    now = timezone.localtime(now or timezone.now())
    return now.date(), now.strftime('%H:%M')


def _in_past(booking, today, clock) -> bool:
    return booking.date < today or (booking.date == today and booking.time < clock)


def member_stats(user_id, now=None) -> dict:
    """Total bookings, bookings this week, and coffee chats already had."""
    today, clock = _moment(now)
    sunday, saturday = week_bounds(today)
    try:
        bookings = list(Booking.objects.filter(user_id=user_id).only('date', 'time', 'status'))
    except DatabaseError as exc:
        raise StoreUnavailable() from exc

    completed = sum(
        1 for b in bookings
        if b.status == BookingStatus.COMPLETED
        or (b.status == BookingStatus.CONFIRMED and _in_past(b, today, clock))
    )
    return {
        'total': len(bookings),
        'this_week': sum(1 for b in bookings if sunday <= b.date <= saturday),
        'completed': completed,
    }


def admin_stats(now=None) -> dict:
    """Console KPIs: members, confirmed chats still ahead this week, completed, pending."""
    today, clock = _moment(now)
    _, saturday = week_bounds(today)
    try:
        qs = Booking.objects.all()
        upcoming = [
            b for b in qs.filter(
                status=BookingStatus.CONFIRMED, date__gte=today, date__lte=saturday,
            ).only('date', 'time')
            if not _in_past(b, today, clock)
        ]
        return {
            'members':   Member.objects.count(),
            'this_week': len(upcoming),
            'completed': qs.filter(status=BookingStatus.COMPLETED).count(),
            'pending':   qs.filter(status=BookingStatus.PENDING).count(),
        }
    except DatabaseError as exc:
        raise StoreUnavailable() from exc
