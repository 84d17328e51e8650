"""End-to-end tests through the Django test client."""
import pytest
from django.urls import reverse

from apps.accounts.models import Member, Role
from apps.bookings.models import Booking, BookingStatus
from apps.bookings.wizard import DRAFT_KEY
from apps.slots.editor import SESSION_KEY as SLOT_EDITOR_KEY
from apps.slots.registry import get_slots, set_slots


def _messages(response):
    return [str(m) for m in response.context['messages']]


@pytest.mark.django_db
class TestSignIn:

    def test_login_and_logout(self, client, alice, password):
        response = client.post(reverse('accounts:login'), {'display_name': 'Alice', 'password': password})
        assert response.status_code == 302
        assert response.url == reverse('pages:dashboard')
        assert client.session['identity']['display_name'] == 'Alice'

        response = client.post(reverse('accounts:logout'))
        assert response.url == reverse('accounts:login')
        assert 'identity' not in client.session

    def test_admin_lands_on_the_console(self, client, admin_member, password):
        response = client.post(reverse('accounts:login'), {'display_name': 'Admin', 'password': password})
        assert response.url == reverse('dashboard:overview')

    def test_wrong_password(self, client, alice):
        response = client.post(reverse('accounts:login'), {'display_name': 'Alice', 'password': 'nope'})
        assert response.status_code == 200
        assert 'Invalid name or password.' in _messages(response)
        assert 'identity' not in client.session

    def test_next_is_honoured(self, client, alice, password):
        response = client.post(
            reverse('accounts:login') + '?next=/my-bookings/',
            {'display_name': 'Alice', 'password': password, 'next': '/my-bookings/'},
        )
        assert response.url == '/my-bookings/'

    def test_offsite_next_is_ignored(self, client, alice, password):
        response = client.post(
            reverse('accounts:login'),
            {'display_name': 'Alice', 'password': password, 'next': 'https://evil.example.com/'},
        )
        assert response.url == reverse('pages:dashboard')

    def test_anonymous_is_sent_to_login(self, client, db):
        response = client.get(reverse('bookings:date'))
        assert response.status_code == 302
        assert response.url.startswith('/login/?next=/booking/')

    def test_corrupt_identity_is_discarded(self, client, db):
        session = client.session
        session['identity'] = {'id': 'x', 'role': 'root'}
        session.save()

        response = client.get(reverse('pages:dashboard'))
        assert response.url.startswith('/login/')
        assert 'identity' not in client.session

    def test_members_cannot_open_the_console(self, alice_client):
        response = alice_client.get(reverse('dashboard:overview'))
        assert response.url == reverse('pages:dashboard')


@pytest.mark.django_db
class TestBookingFlow:

    def test_full_booking(self, alice_client, open_day):
        response = alice_client.get(reverse('bookings:date'))
        assert response.status_code == 200
        assert open_day in response.context['dates']

        response = alice_client.post(reverse('bookings:date'), {'date': open_day.isoformat()})
        assert response.url == reverse('bookings:time')

        response = alice_client.get(reverse('bookings:time'))
        assert [o['label'] for o in response.context['options']] == ['10:00', '10:30', '11:00']

        response = alice_client.post(reverse('bookings:time'), {'time': '10:00'})
        assert response.url == reverse('bookings:confirm')

        revision = alice_client.get(reverse('bookings:confirm')).context['wizard'].revision
        response = alice_client.post(reverse('bookings:confirm'), {
            'phone': '010-1111-2222', 'revision': revision,
        })
        assert response.url == reverse('bookings:done')

        booking = Booking.objects.get()
        assert booking.status == BookingStatus.PENDING
        assert DRAFT_KEY not in alice_client.session

        response = alice_client.get(reverse('bookings:done'))
        assert response.context['booking'] == booking

    def test_steps_cannot_be_skipped(self, alice_client, open_day):
        assert alice_client.get(reverse('bookings:time')).url == reverse('bookings:date')
        assert alice_client.get(reverse('bookings:confirm')).url == reverse('bookings:date')
        assert alice_client.get(reverse('bookings:done')).url == reverse('bookings:date')

    def test_any_non_empty_phone_is_accepted(self, alice_client, open_day):
        alice_client.post(reverse('bookings:date'), {'date': open_day.isoformat()})
        alice_client.post(reverse('bookings:time'), {'time': '10:00'})
        revision = alice_client.get(reverse('bookings:confirm')).context['wizard'].revision

        response = alice_client.post(reverse('bookings:confirm'), {'phone': '1234', 'revision': revision})
        assert response.url == reverse('bookings:done')
        assert Booking.objects.get().user_phone == '1234'

    def test_blank_phone_stays_on_confirm(self, alice_client, open_day):
        alice_client.post(reverse('bookings:date'), {'date': open_day.isoformat()})
        alice_client.post(reverse('bookings:time'), {'time': '10:00'})
        revision = alice_client.get(reverse('bookings:confirm')).context['wizard'].revision

        response = alice_client.post(reverse('bookings:confirm'), {'phone': '   ', 'revision': revision})
        assert response.status_code == 200
        assert 'phone' in response.context['form'].errors
        assert Booking.objects.count() == 0

    def test_taken_slot_sends_back_to_time(self, alice_client, bob, open_day, make_booking):
        alice_client.post(reverse('bookings:date'), {'date': open_day.isoformat()})
        alice_client.post(reverse('bookings:time'), {'time': '10:00'})
        revision = alice_client.get(reverse('bookings:confirm')).context['wizard'].revision
        make_booking(bob, open_day, '10:00')

        response = alice_client.post(reverse('bookings:confirm'), {
            'phone': '010-1111-2222', 'revision': revision,
        })
        assert response.url == reverse('bookings:time')
        assert Booking.objects.count() == 1

    def test_back_and_reset(self, alice_client, open_day):
        alice_client.post(reverse('bookings:date'), {'date': open_day.isoformat()})
        assert alice_client.post(reverse('bookings:back')).url == reverse('bookings:date')

        alice_client.post(reverse('bookings:reset'))
        assert DRAFT_KEY not in alice_client.session

    def test_edit_flow(self, alice_client, alice, open_day, make_booking):
        booking = make_booking(alice, open_day, '10:00', status=BookingStatus.CONFIRMED)

        response = alice_client.get(reverse('bookings:edit_date', args=[booking.pk]))
        assert response.status_code == 200
        assert response.context['editing']

        alice_client.post(reverse('bookings:edit_date', args=[booking.pk]), {'date': open_day.isoformat()})
        alice_client.post(reverse('bookings:edit_time', args=[booking.pk]), {'time': '11:00'})
        revision = alice_client.get(
            reverse('bookings:edit_confirm', args=[booking.pk])
        ).context['wizard'].revision
        response = alice_client.post(reverse('bookings:edit_confirm', args=[booking.pk]), {
            'phone': '010-2222-3333', 'revision': revision,
        })
        assert response.url == reverse('bookings:my_bookings')

        booking.refresh_from_db()
        assert (booking.time, booking.status) == ('11:00', BookingStatus.CONFIRMED)
        assert booking.updated_at is not None

    def test_cannot_edit_completed_booking(self, alice_client, alice, open_day, make_booking):
        booking = make_booking(alice, open_day, '10:00', status=BookingStatus.COMPLETED)
        response = alice_client.get(reverse('bookings:edit_date', args=[booking.pk]))
        assert response.url == reverse('bookings:my_bookings')

    def test_reopening_an_edit_starts_from_the_stored_booking(self, alice_client, alice, open_day,
                                                               make_booking):
        booking = make_booking(alice, open_day, '10:00')
        alice_client.get(reverse('bookings:edit_date', args=[booking.pk]))
        alice_client.post(reverse('bookings:edit_date', args=[booking.pk]), {'date': open_day.isoformat()})
        alice_client.post(reverse('bookings:edit_time', args=[booking.pk]), {'time': '11:00'})
        alice_client.get(reverse('bookings:my_bookings'))

        response = alice_client.get(reverse('bookings:edit_date', args=[booking.pk]))
        wizard = response.context['wizard']
        assert (wizard.date, wizard.time) == (open_day.isoformat(), '10:00')
        assert wizard.step == 1

    def test_booking_closed_after_edit_started(self, alice_client, alice, open_day, make_booking):
        booking = make_booking(alice, open_day, '10:00')
        alice_client.get(reverse('bookings:edit_date', args=[booking.pk]))
        alice_client.post(reverse('bookings:edit_date', args=[booking.pk]), {'date': open_day.isoformat()})
        alice_client.post(reverse('bookings:edit_time', args=[booking.pk]), {'time': '11:00'})
        Booking.objects.filter(pk=booking.pk).update(status=BookingStatus.COMPLETED)

        for name in ('bookings:edit_date', 'bookings:edit_time', 'bookings:edit_confirm'):
            response = alice_client.get(reverse(name, args=[booking.pk]))
            assert response.url == reverse('bookings:my_bookings')


@pytest.mark.django_db
class TestMyBookings:

    def test_upcoming_and_past(self, alice_client, alice, today, soon, make_booking):
        upcoming = make_booking(alice, soon, '10:00')
        done = make_booking(alice, soon, '11:00', status=BookingStatus.COMPLETED)
        old = make_booking(alice, '2020-01-01', '10:00')

        response = alice_client.get(reverse('bookings:my_bookings'))
        assert response.context['upcoming'] == [upcoming]
        assert set(response.context['past']) == {done, old}

    def test_cancel_own_booking(self, alice_client, alice, soon, make_booking):
        booking = make_booking(alice, soon, '10:00')
        alice_client.post(reverse('bookings:cancel', args=[booking.pk]))
        assert not Booking.objects.filter(pk=booking.pk).exists()

    def test_cannot_cancel_someone_elses(self, alice_client, bob, soon, make_booking):
        booking = make_booking(bob, soon, '10:00')
        alice_client.post(reverse('bookings:cancel', args=[booking.pk]))
        assert Booking.objects.filter(pk=booking.pk).exists()

    def test_user_dashboard(self, alice_client, alice, soon, make_booking):
        make_booking(alice, soon, '10:00')
        response = alice_client.get(reverse('pages:dashboard'))
        assert response.status_code == 200
        assert len(response.context['upcoming']) == 1
        assert response.context['stats']['total'] == 1


@pytest.mark.django_db
class TestAdminConsole:

    def test_overview(self, admin_client):
        response = admin_client.get(reverse('dashboard:overview'))
        assert response.status_code == 200
        assert response.context['kpis']['members'] == 1

    def test_duplicate_member_name(self, admin_client, alice):
        response = admin_client.post(reverse('dashboard:member_create'), {
            'display_name': 'Alice', 'password': 'pw', 'role': Role.USER,
        })
        assert response.status_code == 200
        assert 'display_name' in response.context['form'].errors
        assert Member.objects.filter(display_name='Alice').count() == 1

    def test_create_edit_delete_member(self, admin_client):
        admin_client.post(reverse('dashboard:member_create'), {
            'display_name': 'Carol', 'password': 'pw', 'role': Role.USER,
        })
        carol = Member.objects.get(display_name='Carol')

        admin_client.post(reverse('dashboard:member_edit', args=[carol.pk]), {
            'display_name': 'Caroline', 'role': Role.ADMIN,
        })
        carol.refresh_from_db()
        assert (carol.display_name, carol.role) == ('Caroline', Role.ADMIN)

        admin_client.post(reverse('dashboard:member_delete', args=[carol.pk]))
        assert not Member.objects.filter(pk=carol.pk).exists()

    def test_admin_cannot_delete_self(self, admin_client, admin_member):
        admin_client.post(reverse('dashboard:member_delete', args=[admin_member.pk]))
        assert Member.objects.filter(pk=admin_member.pk).exists()

    def test_create_booking_outside_the_registry_warns(self, admin_client, alice, soon):
        set_slots(soon, ['10:00'])
        response = admin_client.post(reverse('dashboard:booking_create'), {
            'user': alice.pk, 'date': soon.isoformat(), 'time': '15:00',
            'status': BookingStatus.CONFIRMED, 'location': 'Cafe', 'title': 'Chat',
        }, follow=True)

        booking = Booking.objects.get()
        assert (booking.time, booking.user_name) == ('15:00', 'Alice')
        assert any('not an offered slot' in m for m in _messages(response))

    def test_create_form_defaults(self, admin_client, admin_member):
        form = admin_client.get(reverse('dashboard:booking_create')).context['form']
        assert form.initial['status'] == BookingStatus.PENDING
        assert form.initial['host'] == str(admin_member.pk)

    def test_inline_status_change(self, admin_client, alice, soon, make_booking):
        booking = make_booking(alice, soon, '10:00')
        admin_client.post(reverse('dashboard:booking_status', args=[booking.pk]), {'status': 'confirmed'})
        booking.refresh_from_db()
        assert booking.status == BookingStatus.CONFIRMED

    def test_search(self, admin_client, alice, bob, soon, make_booking):
        make_booking(alice, soon, '10:00')
        make_booking(bob, soon, '11:00')
        response = admin_client.get(reverse('dashboard:booking_list'), {'q': 'bob'})
        assert [b.user_name for b in response.context['bookings']] == ['Bob']

    def test_slot_editor_toggle_save(self, admin_client, soon):
        day = soon.isoformat()
        set_slots(soon, ['10:00', '10:30'])

        admin_client.post(reverse('dashboard:slot_toggle', args=[day]), {'label': '10:00'})
        admin_client.post(reverse('dashboard:slot_toggle', args=[day]), {'label': '13:00'})
        response = admin_client.get(reverse('dashboard:slot_editor'), {'date': day})
        assert response.context['has_changes']
        assert get_slots(soon) == ['10:00', '10:30']

        admin_client.post(reverse('dashboard:slot_save', args=[day]))
        assert get_slots(soon) == ['10:30', '13:00']
        assert day not in admin_client.session[SLOT_EDITOR_KEY]

    def test_slot_editor_discard(self, admin_client, soon):
        day = soon.isoformat()
        admin_client.post(reverse('dashboard:slot_toggle', args=[day]), {'label': '13:00'})
        admin_client.post(reverse('dashboard:slot_discard', args=[day]))
        assert get_slots(soon) == []
        response = admin_client.get(reverse('dashboard:slot_editor'), {'date': day})
        assert not response.context['has_changes']


@pytest.mark.django_db
def test_unknown_page_is_404(client):
    response = client.get('/no-such-page/')
    assert response.status_code == 404
