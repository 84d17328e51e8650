"""Tests for dashboard statistics."""
from datetime import date, datetime

import pytest
from django.utils import timezone

from apps.bookings.models import BookingStatus
from apps.bookings.stats import admin_stats, member_stats, week_bounds


def _at(year, month, day, hour=12, minute=0):
    return timezone.make_aware(datetime(year, month, day, hour, minute))


class TestWeekBounds:

    @pytest.mark.parametrize('today', [date(2025, 3, 9), date(2025, 3, 12), date(2025, 3, 15)])
    def test_sunday_to_saturday(self, today):
        assert week_bounds(today) == (date(2025, 3, 9), date(2025, 3, 15))


@pytest.mark.django_db
class TestMemberStats:

    def test_counts(self, alice, bob, make_booking):
        # Wednesday 2025-03-12, noon
        now = _at(2025, 3, 12)
        make_booking(alice, '2025-03-09', '10:00', status=BookingStatus.COMPLETED)
        make_booking(alice, '2025-03-12', '10:00', status=BookingStatus.CONFIRMED)   # earlier today
        make_booking(alice, '2025-03-12', '15:00', status=BookingStatus.CONFIRMED)   # later today
        make_booking(alice, '2025-03-16', '10:00')                                   # next week
        make_booking(bob, '2025-03-12', '11:00', status=BookingStatus.COMPLETED)

        assert member_stats(alice.pk, now=now) == {'total': 4, 'this_week': 3, 'completed': 2}

    def test_no_bookings(self, alice):
        assert member_stats(alice.pk) == {'total': 0, 'this_week': 0, 'completed': 0}


@pytest.mark.django_db
class TestAdminStats:

    def test_counts(self, admin_member, alice, bob, make_booking):
        now = _at(2025, 3, 12)
        make_booking(alice, '2025-03-12', '10:00', status=BookingStatus.CONFIRMED)   # already past
        make_booking(alice, '2025-03-12', '15:00', status=BookingStatus.CONFIRMED)
        make_booking(bob, '2025-03-15', '10:00', status=BookingStatus.CONFIRMED)
        make_booking(bob, '2025-03-16', '10:00', status=BookingStatus.CONFIRMED)     # next week
        make_booking(bob, '2025-03-13', '10:00')
        make_booking(alice, '2025-03-01', '10:00', status=BookingStatus.COMPLETED)

        assert admin_stats(now=now) == {
            'members': 3, 'this_week': 2, 'completed': 1, 'pending': 1,
        }
