"""Tests for the availability resolver."""
from datetime import date, timedelta

import pytest

from apps.bookings.models import BookingStatus
from apps.bookings.resolver import resolve_bookable_dates, resolve_free_slots
from apps.slots.registry import set_slots


@pytest.mark.django_db
class TestFreeSlots:

    def test_all_slots_free_without_bookings(self):
        set_slots('2025-03-10', ['10:00', '10:30', '11:00'])
        assert resolve_free_slots('2025-03-10') == ['10:00', '10:30', '11:00']

    def test_pending_booking_takes_its_slot(self, alice, make_booking):
        set_slots('2025-03-10', ['10:00', '10:30', '11:00'])
        make_booking(alice, '2025-03-10', '10:30')
        assert resolve_free_slots('2025-03-10') == ['10:00', '11:00']

    def test_confirmed_takes_slots_but_closed_bookings_do_not(self, alice, make_booking):
        set_slots('2025-03-10', ['10:00', '10:30', '11:00', '11:30'])
        make_booking(alice, '2025-03-10', '10:00', status=BookingStatus.CONFIRMED)
        make_booking(alice, '2025-03-10', '10:30', status=BookingStatus.COMPLETED)
        make_booking(alice, '2025-03-10', '11:00', status=BookingStatus.CANCELLED)

        assert resolve_free_slots('2025-03-10') == ['10:30', '11:00', '11:30']

    def test_free_slots_never_overlap_active_bookings(self, alice, bob, make_booking):
        set_slots('2025-03-10', ['10:00', '10:30', '11:00', '13:00'])
        taken = {
            make_booking(alice, '2025-03-10', '10:00').time,
            make_booking(bob, '2025-03-10', '13:00', status=BookingStatus.CONFIRMED).time,
        }
        assert taken.isdisjoint(resolve_free_slots('2025-03-10'))

    def test_unconfigured_date_has_nothing_free(self):
        assert resolve_free_slots('2025-03-10') == []

    def test_bookings_outside_the_registry_are_ignored(self, alice, make_booking):
        set_slots('2025-03-10', ['10:00'])
        make_booking(alice, '2025-03-10', '15:00')
        assert resolve_free_slots('2025-03-10') == ['10:00']

    def test_excluded_booking_keeps_its_own_slot(self, alice, make_booking):
        set_slots('2025-03-10', ['10:00', '10:30'])
        booking = make_booking(alice, '2025-03-10', '10:00')

        assert resolve_free_slots('2025-03-10') == ['10:30']
        assert resolve_free_slots('2025-03-10', exclude_booking_id=booking.pk) == ['10:00', '10:30']


@pytest.mark.django_db
class TestBookableDates:

    def test_dates_within_the_horizon_with_slots(self):
        today = date(2025, 3, 1)
        set_slots('2025-03-01', ['10:00'])
        set_slots('2025-03-05', ['10:00'])
        set_slots('2025-03-06', [])
        set_slots('2025-02-28', ['10:00'])
        set_slots(today + timedelta(days=31), ['10:00'])

        assert resolve_bookable_dates(30, today=today) == {'2025-03-01', '2025-03-05'}

    def test_horizon_end_is_inclusive(self):
        today = date(2025, 3, 1)
        set_slots(today + timedelta(days=30), ['10:00'])
        assert resolve_bookable_dates(30, today=today) == {'2025-03-31'}

    def test_fully_booked_date_is_still_bookable(self, alice, make_booking):
        today = date(2025, 3, 1)
        set_slots('2025-03-02', ['10:00'])
        make_booking(alice, '2025-03-02', '10:00', status=BookingStatus.CONFIRMED)

        assert '2025-03-02' in resolve_bookable_dates(30, today=today)
        assert resolve_free_slots('2025-03-02') == []
