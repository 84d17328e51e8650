from datetime import timedelta

import pytest
from django.utils import timezone

from apps.accounts.models import Member, Role
from apps.accounts.session import Identity
from apps.bookings import ledger
from apps.bookings.models import BookingStatus
from apps.slots.registry import set_slots

PASSWORD = 'pw-12345'


@pytest.fixture
def password():
    """Password every member fixture signs in with."""
    return PASSWORD


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def soon(today):
    """A bookable date a few days out."""
    return today + timedelta(days=3)


@pytest.fixture
def admin_member(db):
    return Member.objects.create_user('Admin', PASSWORD, role=Role.ADMIN)


@pytest.fixture
def alice(db):
    return Member.objects.create_user('Alice', PASSWORD)


@pytest.fixture
def bob(db):
    return Member.objects.create_user('Bob', PASSWORD)


@pytest.fixture
def alice_identity(alice):
    return Identity.from_member(alice)


@pytest.fixture
def admin_identity(admin_member):
    return Identity.from_member(admin_member)


@pytest.fixture
def open_day(db, soon):
    """`soon` offers 10:00, 10:30 and 11:00."""
    set_slots(soon, ['10:00', '10:30', '11:00'])
    return soon


@pytest.fixture
def make_booking(db):
    def _make(user, day, time, status=BookingStatus.PENDING, **extra):
        return ledger.create_booking({
            'user': user.pk, 'date': day, 'time': time, 'status': status, **extra,
        })
    return _make


def sign_in(client, member):
    session = client.session
    session['identity'] = Identity.from_member(member).as_dict()
    session.save()
    return client


@pytest.fixture
def alice_client(client, alice):
    return sign_in(client, alice)


@pytest.fixture
def admin_client(client, admin_member):
    return sign_in(client, admin_member)
