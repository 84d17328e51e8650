"""
Booking flow views — multi-page wizard backed by the session.

Each step view rebuilds a BookingWizard from the session and sends the
member back to the furthest step the draft allows. The same views serve
new bookings (/booking/...) and edits of an existing booking
(/booking/<uuid>/edit/...); the URL decides the mode.
"""
import logging
from datetime import datetime

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import member_required
from apps.core.exceptions import CoffeeChatError, NotFoundError, StoreUnavailable, ValidationError
from . import ledger
from .exceptions import BookingNotEditable, SlotUnavailable, StaleDraft, WizardBusy
from .forms import ConfirmForm, DateForm, TimeForm
from .models import BookingStatus
from .wizard import BookingWizard, WizardStep

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

STEP_URLS = {
    WizardStep.SELECTING_DATE: 'date',
    WizardStep.SELECTING_TIME: 'time',
    WizardStep.CONFIRMING:     'confirm',
    WizardStep.DONE:           'done',
}


def _step_url(wizard, name):
    if wizard.editing:
        return reverse(f'bookings:edit_{name}', kwargs={'booking_id': wizard.booking_id})
    return reverse(f'bookings:{name}')


def _to_step(wizard, step=None):
    return redirect(_step_url(wizard, STEP_URLS[wizard.step if step is None else step]))


def _load_wizard(request, booking_id=None, entry=False):
    """
    Wizard for this request. Returns (wizard, None), or (None, redirect)
    when the booking can't be edited.

    In edit mode the booking is re-checked on every request, and reloaded
    from the ledger on entry (`entry`) or when no edit state is kept.
    """
    wizard = BookingWizard(request.session, request.identity, booking_id=booking_id)
    if not wizard.editing:
        return wizard, None
    try:
        if entry or not wizard.loaded:
            wizard.start_edit()
        else:
            wizard.editable_booking()
    except (BookingNotEditable, NotFoundError) as exc:
        logger.warning('Member %s cannot edit booking %s: %s',
                       request.identity.id, booking_id, exc.message)
        messages.error(request, exc.message)
        return None, redirect('bookings:my_bookings')
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        return None, redirect('bookings:my_bookings')
    return wizard, None


def _wizard_context(wizard, **extra):
    selected = datetime.strptime(wizard.date, '%Y-%m-%d').date() if wizard.date else None
    return {
        'wizard':        wizard,
        'editing':       wizard.editing,
        'step':          wizard.step,
        'steps':         [s for s in WizardStep if s != WizardStep.DONE or not wizard.editing],
        'selected_date': selected,
        'back_url':      _step_url(wizard, 'back'),
        'reset_url':     _step_url(wizard, 'reset'),
        **extra,
    }


# ─────────────────────────────────────────────────────────────────────────────
# Step 1 — Date Selection
# ─────────────────────────────────────────────────────────────────────────────

@member_required
def step_date(request, booking_id=None):
    # Opening an edit always starts from the booking as stored
    wizard, bail = _load_wizard(request, booking_id, entry=request.method == 'GET')
    if bail:
        return bail
    if wizard.step == WizardStep.DONE:
        wizard.start_new()

    if request.method == 'POST':
        form = DateForm(request.POST)
        if not form.is_valid():
            messages.error(request, 'Please choose a valid date.')
            return redirect(_step_url(wizard, 'date'))
        try:
            wizard.select_date(form.cleaned_data['date'])
        except ValidationError as exc:
            messages.error(request, exc.message)
            return redirect(_step_url(wizard, 'date'))
        except StoreUnavailable as exc:
            messages.error(request, exc.message)
            return redirect(_step_url(wizard, 'date'))
        return _to_step(wizard)

    try:
        dates = sorted(wizard.bookable_dates())
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        dates = []

    return render(request, 'bookings/step_date.html', _wizard_context(
        wizard,
        dates=[datetime.strptime(d, '%Y-%m-%d').date() for d in dates],
        form=DateForm(initial={'date': wizard.date}),
        today=timezone.localdate(),
    ))


# ─────────────────────────────────────────────────────────────────────────────
# Step 2 — Time Selection
# ─────────────────────────────────────────────────────────────────────────────

@member_required
def step_time(request, booking_id=None):
    wizard, bail = _load_wizard(request, booking_id)
    if bail:
        return bail
    if not wizard.date or wizard.step < WizardStep.SELECTING_TIME or wizard.step == WizardStep.DONE:
        return _to_step(wizard)

    if request.method == 'POST':
        form = TimeForm(request.POST)
        if not form.is_valid():
            messages.error(request, 'Please select a time slot.')
            return redirect(_step_url(wizard, 'time'))
        try:
            wizard.select_time(form.cleaned_data['time'])
        except SlotUnavailable as exc:
            logger.info('Member %s picked a taken slot %s %s',
                        request.identity.id, wizard.date, form.cleaned_data['time'])
            messages.error(request, exc.message)
            return redirect(_step_url(wizard, 'time'))
        except (ValidationError, StoreUnavailable) as exc:
            messages.error(request, exc.message)
            return redirect(_step_url(wizard, 'time'))
        return _to_step(wizard)

    try:
        options = wizard.time_options()
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        options = []

    return render(request, 'bookings/step_time.html', _wizard_context(
        wizard,
        options=options,
        has_free=any(o['free'] for o in options),
    ))


# ─────────────────────────────────────────────────────────────────────────────
# Step 3 — Confirm & Submit
# ─────────────────────────────────────────────────────────────────────────────

@member_required
def step_confirm(request, booking_id=None):
    wizard, bail = _load_wizard(request, booking_id)
    if bail:
        return bail
    if wizard.step != WizardStep.CONFIRMING:
        return _to_step(wizard)

    if request.method == 'POST':
        form = ConfirmForm(request.POST)
        if not form.is_valid():
            return render(request, 'bookings/step_confirm.html', _wizard_context(wizard, form=form))

        try:
            booking = wizard.submit(form.cleaned_data['phone'], form.cleaned_data['revision'])
        except StaleDraft as exc:
            logger.info('Ignored stale submit from member %s', request.identity.id)
            messages.warning(request, exc.message)
            return _to_step(wizard)
        except WizardBusy as exc:
            messages.warning(request, exc.message)
            return redirect(_step_url(wizard, 'confirm'))
        except SlotUnavailable as exc:
            messages.error(request, exc.message)
            return redirect(_step_url(wizard, 'time'))
        except CoffeeChatError as exc:
            messages.error(request, exc.message)
            return redirect(_step_url(wizard, 'confirm'))

        if wizard.editing:
            messages.success(request, f'Your coffee chat moved to {booking.date:%b %d} at {booking.time}.')
            return redirect('bookings:my_bookings')
        return redirect('bookings:done')

    form = ConfirmForm(initial={'phone': wizard.phone, 'revision': wizard.revision})
    return render(request, 'bookings/step_confirm.html', _wizard_context(wizard, form=form))


# ─────────────────────────────────────────────────────────────────────────────
# Done / navigation
# ─────────────────────────────────────────────────────────────────────────────

@member_required
def step_done(request):
    wizard = BookingWizard(request.session, request.identity)
    if wizard.step != WizardStep.DONE:
        return _to_step(wizard)

    try:
        booking = ledger.get_booking(wizard.done_booking_id)
    except NotFoundError:
        # Deleted since (e.g. by an admin)
        wizard.reset()
        return redirect('bookings:date')
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        return redirect('pages:dashboard')

    if str(booking.user_id) != request.identity.id:
        wizard.reset()
        return redirect('bookings:date')

    return render(request, 'bookings/done.html', _wizard_context(wizard, booking=booking))


@member_required
@require_POST
def step_back(request, booking_id=None):
    wizard, bail = _load_wizard(request, booking_id)
    if bail:
        return bail
    wizard.back()
    return _to_step(wizard)


@member_required
@require_POST
def reset(request, booking_id=None):
    wizard = BookingWizard(request.session, request.identity, booking_id=booking_id)
    wizard.reset()
    if booking_id:
        return redirect('bookings:my_bookings')
    return redirect('bookings:date')


# ─────────────────────────────────────────────────────────────────────────────
# My Bookings
# ─────────────────────────────────────────────────────────────────────────────

@member_required
def my_bookings(request):
    today = timezone.localdate()
    try:
        bookings = ledger.list_by_user(request.identity.id)
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        bookings = []

    upcoming = sorted(
        (b for b in bookings if b.is_active and b.date >= today),
        key=lambda b: (b.date, b.time),
    )
    past = [b for b in bookings if not (b.is_active and b.date >= today)]

    return render(request, 'bookings/my_bookings.html', {
        'upcoming':        upcoming,
        'past':            past,
        'completed_count': sum(1 for b in bookings if b.status == BookingStatus.COMPLETED),
    })


@member_required
@require_POST
def cancel_booking(request, booking_id):
    """Owner cancels an upcoming booking. The record is removed."""
    try:
        booking = ledger.get_booking(booking_id)
    except (NotFoundError, StoreUnavailable) as exc:
        messages.error(request, exc.message)
        return redirect('bookings:my_bookings')

    if str(booking.user_id) != request.identity.id:
        logger.warning('Member %s tried to cancel booking %s of %s',
                       request.identity.id, booking_id, booking.user_id)
        messages.error(request, 'You can only cancel your own bookings.')
        return redirect('bookings:my_bookings')
    if not booking.is_active:
        messages.error(request, 'Completed or cancelled bookings cannot be cancelled.')
        return redirect('bookings:my_bookings')

    try:
        ledger.delete_booking(booking_id)
    except (NotFoundError, StoreUnavailable) as exc:
        messages.error(request, exc.message)
        return redirect('bookings:my_bookings')

    messages.success(request, 'Your coffee chat has been cancelled.')
    return redirect('bookings:my_bookings')
