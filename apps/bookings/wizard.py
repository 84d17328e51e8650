"""
Booking wizard — the multi-step reservation flow as a state machine.

  SELECTING_DATE → SELECTING_TIME → CONFIRMING → DONE

New bookings checkpoint their draft in request.session['booking_draft']
after every change:
{
    "date":     "YYYY-MM-DD" | null,
    "time":     "HH:MM" | "",
    "phone":    "...",
    "step":     1 | 2 | 3,
    "revision": <int, bumped on every change>,
}

Editing an existing booking keeps the same shape plus "booking_id" under
request.session['booking_edit'], wipes any new-booking checkpoint, and has
no DONE step: a successful submit hands control back to the caller.

After a new booking is created the draft is dropped and its id is left in
request.session['booking_done'] for the confirmation page.
"""
import logging
from contextlib import contextmanager

from django.conf import settings
from django.db import OperationalError, models, transaction

from apps.accounts.models import Member
from apps.core.exceptions import ValidationError
from apps.slots import registry
from . import ledger, resolver
from .exceptions import BookingNotEditable, SlotUnavailable, StaleDraft, WizardBusy
from .models import BookingStatus, CLOSED_STATUSES

logger = logging.getLogger(__name__)

DRAFT_KEY = 'booking_draft'
EDIT_KEY = 'booking_edit'
DONE_KEY = 'booking_done'


class WizardStep(models.IntegerChoices):
    SELECTING_DATE = 1, 'Select date'
    SELECTING_TIME = 2, 'Select time'
    CONFIRMING     = 3, 'Confirm'
    DONE           = 4, 'Done'


def _empty_draft(booking_id=None) -> dict:
    draft = {'date': None, 'time': '', 'phone': '', 'step': WizardStep.SELECTING_DATE, 'revision': 0}
    if booking_id:
        draft['booking_id'] = str(booking_id)
    return draft


def _coerce_draft(raw):
    """Validate a checkpoint read back from the session. None if corrupt."""
    if not isinstance(raw, dict):
        return None
    step, revision = raw.get('step'), raw.get('revision', 0)
    date, time, phone = raw.get('date') or None, raw.get('time') or '', raw.get('phone') or ''
    if step not in (WizardStep.SELECTING_DATE, WizardStep.SELECTING_TIME, WizardStep.CONFIRMING):
        return None
    if not isinstance(revision, int) or not isinstance(phone, str):
        return None
    if date is not None:
        try:
            date = registry.as_date(date).isoformat()
        except ValidationError:
            return None
    if time and not registry.is_valid_label(time):
        return None
    if step >= WizardStep.SELECTING_TIME and date is None:
        return None
    if step == WizardStep.CONFIRMING and not time:
        return None

    draft = {'date': date, 'time': time, 'phone': phone, 'step': step, 'revision': revision}
    if raw.get('booking_id'):
        draft['booking_id'] = str(raw['booking_id'])
    return draft


class BookingWizard:
    """
    One member's booking flow, bound to their session.

    Pass booking_id to work on an existing booking (edit mode); call
    start_edit() once to load it when `loaded` is False.
    """

    def __init__(self, session, identity, booking_id=None, horizon_days=None):
        if identity is None:
            raise ValidationError('Sign in to book a coffee chat.')
        self.session = session
        self.identity = identity
        self.booking_id = str(booking_id) if booking_id else None
        self.horizon_days = settings.BOOKING_HORIZON_DAYS if horizon_days is None else horizon_days
        self.loaded = True
        self.draft = self._restore()

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def editing(self) -> bool:
        return self.booking_id is not None

    @property
    def step(self) -> int:
        if (not self.editing and self.draft['date'] is None
                and self.session.get(DONE_KEY)):
            return WizardStep.DONE
        return self.draft['step']

    @property
    def date(self):
        return self.draft['date']

    @property
    def time(self) -> str:
        return self.draft['time']

    @property
    def phone(self) -> str:
        return self.draft['phone']

    @property
    def revision(self) -> int:
        return self.draft['revision']

    @property
    def done_booking_id(self):
        return self.session.get(DONE_KEY)

    # ── Persistence ───────────────────────────────────────────────────────────

    def _restore(self) -> dict:
        if self.editing:
            raw = self.session.get(EDIT_KEY)
            draft = _coerce_draft(raw)
            if draft is None or draft.get('booking_id') != self.booking_id:
                self.loaded = False
                return _empty_draft(self.booking_id)
            return draft

        raw = self.session.get(DRAFT_KEY)
        draft = _coerce_draft(raw)
        if draft is None or 'booking_id' in draft:
            if raw is not None:
                # Corrupt checkpoint: start over silently
                self.session.pop(DRAFT_KEY, None)
            return _empty_draft()
        return draft

    def _checkpoint(self, **changes) -> None:
        self.draft.update(changes)
        self.draft['revision'] += 1
        if self.editing:
            self.session[EDIT_KEY] = dict(self.draft)
            return
        untouched = (self.draft['date'] is None and not self.draft['time']
                     and not self.draft['phone'] and self.draft['step'] == WizardStep.SELECTING_DATE)
        if untouched:
            self.session.pop(DRAFT_KEY, None)
        else:
            self.session[DRAFT_KEY] = dict(self.draft)

    # ── Queries ───────────────────────────────────────────────────────────────

    def bookable_dates(self) -> set:
        return resolver.resolve_bookable_dates(self.horizon_days)

    def free_slots(self) -> list:
        if not self.date:
            return []
        return resolver.resolve_free_slots(self.date, exclude_booking_id=self.booking_id)

    def time_options(self) -> list:
        """Every offered label for the chosen date; taken ones are marked not free."""
        if not self.date:
            return []
        offered = registry.get_slots(self.date)
        free = set(resolver.resolve_free_slots(
            self.date, exclude_booking_id=self.booking_id, offered=offered,
        ))
        return [
            {'label': label, 'free': label in free, 'selected': label == self.time}
            for label in offered
        ]

    # ── Transitions ───────────────────────────────────────────────────────────

    def start_edit(self):
        """
        Load the booking being edited. Only the owner may edit, and only
        while it is pending or confirmed. Nothing is written to the store.
        """
        booking = self.editable_booking()

        self.session.pop(DRAFT_KEY, None)
        self.draft = _empty_draft(self.booking_id)
        self.loaded = True
        self._checkpoint(date=booking.date.isoformat(), time=booking.time, phone=booking.user_phone)
        return booking

    def editable_booking(self):
        """The booking under edit, if this member may still change it."""
        booking = ledger.get_booking(self.booking_id)
        if str(booking.user_id) != self.identity.id:
            raise BookingNotEditable('You can only edit your own bookings.')
        if booking.status in CLOSED_STATUSES:
            raise BookingNotEditable('Completed or cancelled bookings cannot be edited.')
        return booking

    def select_date(self, value):
        """
        Pick a date. An empty pick while a date is already chosen
        re-affirms that date instead of clearing it.
        """
        if value in (None, ''):
            if self.date is None:
                self._checkpoint(time='', step=WizardStep.SELECTING_DATE)
                return self.step
            value = self.date

        iso = registry.as_date(value).isoformat()
        if iso not in self.bookable_dates():
            raise ValidationError('That date is not open for booking.', field='date')

        if not self.editing:
            self.session.pop(DONE_KEY, None)
        self._checkpoint(date=iso, time='', step=WizardStep.SELECTING_TIME)
        return self.step

    def select_time(self, label: str):
        if not self.date:
            raise ValidationError('Please choose a date first.', field='date')
        if label not in self.free_slots():
            raise SlotUnavailable(field='time')
        self._checkpoint(time=label, step=WizardStep.CONFIRMING)
        return self.step

    def back(self):
        self._checkpoint(step=WizardStep.SELECTING_DATE)
        return self.step

    def set_phone(self, phone: str):
        self._checkpoint(phone=(phone or '').strip())

    def submit(self, phone: str, revision=None):
        """
        Write the booking. New: create as pending and move to DONE.
        Edit: update date/time/phone, keeping status and created_at.
        Any failure leaves the wizard at CONFIRMING.
        """
        if self.step != WizardStep.CONFIRMING or not self.date or not self.time:
            raise ValidationError('Please choose a date and a time first.')
        if revision is not None and str(revision) != str(self.revision):
            raise StaleDraft()

        phone = (phone or '').strip()
        if phone != self.phone:
            self._checkpoint(phone=phone)
        if not phone:
            raise ValidationError('Phone number is required.', field='phone')

        with self._submit_guard():
            if self.editing:
                self.editable_booking()
            if self.time not in self.free_slots():
                raise SlotUnavailable(field='time')

            if self.editing:
                booking = ledger.update_booking(self.booking_id, {
                    'date': self.date,
                    'time': self.time,
                    'user_phone': phone,
                })
                self.session.pop(EDIT_KEY, None)
                logger.info('Member %s moved booking %s to %s %s',
                            self.identity.id, booking.pk, self.date, self.time)
                return booking

            booking = ledger.create_booking({
                'user': self.identity.id,
                'user_name': self.identity.display_name,
                'user_phone': phone,
                'host_name': settings.DEFAULT_HOST_NAME,
                'location': settings.DEFAULT_LOCATION,
                'title': settings.DEFAULT_BOOKING_TITLE,
                'date': self.date,
                'time': self.time,
                'status': BookingStatus.PENDING,
            })

        self.session.pop(DRAFT_KEY, None)
        self.session[DONE_KEY] = str(booking.pk)
        self.draft = _empty_draft()
        logger.info('Member %s requested %s %s', self.identity.id, booking.date, booking.time)
        return booking

    def reset(self):
        """Drop the draft (and edit state) and start again at date selection."""
        self.session.pop(DRAFT_KEY, None)
        self.session.pop(DONE_KEY, None)
        if self.editing:
            self.session.pop(EDIT_KEY, None)
        self.draft = _empty_draft(self.booking_id)
        return WizardStep.SELECTING_DATE

    start_new = reset

    # ── Re-entrancy guard ─────────────────────────────────────────────────────

    @contextmanager
    def _submit_guard(self):
        """
        Hold the member's row lock for the whole submit. A second submit
        from any worker process fails fast instead of waiting, and the
        writes made inside roll back together on error.
        """
        with transaction.atomic():
            try:
                _lock_member(self.identity.id)
            except OperationalError as exc:
                logger.info('Submit already in flight for member %s', self.identity.id)
                raise WizardBusy() from exc
            yield


def _lock_member(member_id):
    """SELECT ... FOR UPDATE NOWAIT on the member row. SQLite skips the lock."""
    return (
        Member.objects
        .select_for_update(nowait=True)
        .filter(pk=member_id)
        .first()
    )
