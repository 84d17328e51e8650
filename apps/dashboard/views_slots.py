"""
Slot editor views for the admin console.

The grid for one date is edited in the session (toggle) and only written
to the registry on save.
"""
import logging
from datetime import timedelta

from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_required
from apps.core.exceptions import StoreUnavailable, ValidationError
from apps.slots import registry
from apps.slots.editor import clear_editor, load_editor, store_editor
from .forms import SlotDateForm

logger = logging.getLogger(__name__)


def _editor_url(day):
    return f"{reverse('dashboard:slot_editor')}?date={day.isoformat()}"


def _parse_day(value):
    try:
        return registry.as_date(value)
    except ValidationError:
        return None


@admin_required
def slot_editor(request):
    today = timezone.localdate()
    day = _parse_day(request.GET.get('date', '')) or today

    try:
        editor = load_editor(request.session, day)
        configured = registry.configured_dates(today, today + timedelta(days=60))
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        return render(request, 'dashboard/slots.html', {
            'form': SlotDateForm(initial={'date': day}), 'day': day, 'page': 'slots',
        })

    return render(request, 'dashboard/slots.html', {
        'form':        SlotDateForm(initial={'date': day}),
        'day':         day,
        'editor':      editor,
        'grid':        editor.grid(),
        'has_changes': editor.has_changes,
        'configured':  configured,
        'page': 'slots',
    })


@require_POST
@admin_required
def slot_toggle(request, day):
    day = _parse_day(day)
    if day is None:
        messages.error(request, 'Invalid date.')
        return redirect('dashboard:slot_editor')

    try:
        editor = load_editor(request.session, day)
        editor.toggle(request.POST.get('label', ''))
    except (ValidationError, StoreUnavailable) as exc:
        messages.error(request, exc.message)
    else:
        store_editor(request.session, editor)
    return redirect(_editor_url(day))


@require_POST
@admin_required
def slot_save(request, day):
    day = _parse_day(day)
    if day is None:
        messages.error(request, 'Invalid date.')
        return redirect('dashboard:slot_editor')

    try:
        editor = load_editor(request.session, day)
        if not editor.has_changes:
            messages.info(request, 'No changes to save.')
            return redirect(_editor_url(day))
        stored = editor.save()
    except (ValidationError, StoreUnavailable) as exc:
        messages.error(request, exc.message)
        return redirect(_editor_url(day))

    clear_editor(request.session, day)
    logger.info('Admin %s saved %d slots for %s', request.identity.id, len(stored), day)
    messages.success(request, f'Saved {len(stored)} slots for {day:%Y-%m-%d}.')
    return redirect(_editor_url(day))


@require_POST
@admin_required
def slot_discard(request, day):
    day = _parse_day(day)
    if day is None:
        return redirect('dashboard:slot_editor')
    clear_editor(request.session, day)
    messages.info(request, 'Changes discarded.')
    return redirect(_editor_url(day))
