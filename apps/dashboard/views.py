"""
Admin console views — overview KPIs and booking management.
Members and slots live in views_members.py / views_slots.py.
"""
import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_required
from apps.bookings import ledger
from apps.bookings.models import BookingStatus
from apps.bookings.stats import admin_stats
from apps.core.exceptions import CoffeeChatError, NotFoundError, StoreUnavailable, ValidationError
from apps.slots import registry

from .forms import BookingForm, StatusForm

logger = logging.getLogger(__name__)


def _apply_errors(form, exc):
    """Attach a domain ValidationError to the form field it names."""
    field = exc.field if exc.field in form.fields else None
    form.add_error(field, exc.message)


def _warn_outside_registry(request, booking):
    try:
        offered = registry.get_slots(booking.date)
    except StoreUnavailable:
        return
    if booking.time not in offered:
        messages.warning(
            request,
            f'{booking.time} on {booking.date:%Y-%m-%d} is not an offered slot for that date.',
        )


# ─────────────────────────────────────────────────────────────────────────────
# Overview / KPI dashboard
# ─────────────────────────────────────────────────────────────────────────────

@admin_required
def overview(request):
    today = timezone.localdate()
    try:
        kpis = admin_stats()
        todays_bookings = ledger.list_by_date_status(
            today, [BookingStatus.PENDING, BookingStatus.CONFIRMED],
        )
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        kpis, todays_bookings = None, []

    return render(request, 'dashboard/overview.html', {
        'kpis':            kpis,
        'todays_bookings': todays_bookings,
        'today':           today,
        'page': 'overview',
    })


# ─────────────────────────────────────────────────────────────────────────────
# Booking List
# ─────────────────────────────────────────────────────────────────────────────

@admin_required
def booking_list(request):
    search = request.GET.get('q', '').strip()
    try:
        bookings = ledger.search(search)
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        bookings = []

    return render(request, 'dashboard/booking_list.html', {
        'bookings':       bookings,
        'search':         search,
        'status_choices': BookingStatus.choices,
        'page': 'bookings',
    })


# ─────────────────────────────────────────────────────────────────────────────
# Booking CRUD
# ─────────────────────────────────────────────────────────────────────────────

@admin_required
def booking_create(request):
    now = timezone.localtime()
    form = BookingForm(request.POST or None, initial={
        'status':   BookingStatus.PENDING,
        'date':     now.date(),
        'time':     now.strftime('%H:%M'),
        'host':     request.identity.id,
        'location': settings.DEFAULT_LOCATION,
        'title':    settings.DEFAULT_BOOKING_TITLE,
    })
    if request.method == 'POST' and form.is_valid():
        try:
            booking = ledger.create_booking(form.to_record())
        except ValidationError as exc:
            _apply_errors(form, exc)
        except CoffeeChatError as exc:
            messages.error(request, exc.message)
        else:
            _warn_outside_registry(request, booking)
            messages.success(request, f'Booking #{booking.id_short} created.')
            return redirect('dashboard:booking_list')

    return render(request, 'dashboard/booking_form.html', {
        'form':  form,
        'title': 'Add Booking',
        'page':  'bookings',
    })


@admin_required
def booking_edit(request, booking_id):
    try:
        booking = ledger.get_booking(booking_id)
    except (NotFoundError, StoreUnavailable) as exc:
        messages.error(request, exc.message)
        return redirect('dashboard:booking_list')

    form = BookingForm(request.POST or None, instance=booking)
    if request.method == 'POST' and form.is_valid():
        try:
            booking = ledger.update_booking(booking_id, form.to_record())
        except ValidationError as exc:
            _apply_errors(form, exc)
        except NotFoundError as exc:
            messages.error(request, exc.message)
            return redirect('dashboard:booking_list')
        except CoffeeChatError as exc:
            messages.error(request, exc.message)
        else:
            _warn_outside_registry(request, booking)
            messages.success(request, f'Booking #{booking.id_short} updated.')
            return redirect('dashboard:booking_list')

    return render(request, 'dashboard/booking_form.html', {
        'form':    form,
        'title':   f'Edit Booking — #{booking.id_short}',
        'booking': booking,
        'page':    'bookings',
    })


@require_POST
@admin_required
def booking_delete(request, booking_id):
    try:
        ledger.delete_booking(booking_id)
    except CoffeeChatError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, f'Booking #{str(booking_id)[:8].upper()} deleted.')
    return redirect('dashboard:booking_list')


@require_POST
@admin_required
def booking_status(request, booking_id):
    """Inline status change from the list. Any status may move to any other."""
    form = StatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Please choose a valid status.')
        return redirect('dashboard:booking_list')

    try:
        booking = ledger.update_booking(booking_id, {'status': form.cleaned_data['status']})
    except CoffeeChatError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(
            request, f'Booking #{booking.id_short} is now {booking.get_status_display().lower()}.',
        )

    next_url = request.POST.get('next', '')
    if next_url.startswith('/') and not next_url.startswith('//'):
        return redirect(next_url)
    return redirect('dashboard:booking_list')
