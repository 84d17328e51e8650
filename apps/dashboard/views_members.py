"""Member CRUD views for the admin console."""
import logging
from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.accounts import services
from apps.accounts.decorators import admin_required
from apps.core.exceptions import CoffeeChatError, NotFoundError, StoreUnavailable, ValidationError
from .forms import MemberCreateForm, MemberEditForm

logger = logging.getLogger(__name__)


@admin_required
def member_list(request):
    try:
        members = services.list_members()
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        members = []
    return render(request, 'dashboard/members/list.html', {
        'members': members,
        'page': 'members',
    })


@admin_required
def member_create(request):
    form = MemberCreateForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            member = services.create_member(**form.cleaned_data)
        except ValidationError as exc:
            form.add_error(exc.field if exc.field in form.fields else None, exc.message)
        except CoffeeChatError as exc:
            messages.error(request, exc.message)
        else:
            messages.success(request, f'Member "{member.display_name}" created.')
            return redirect('dashboard:member_list')
    return render(request, 'dashboard/members/form.html', {
        'form':  form,
        'title': 'Add Member',
        'page':  'members',
    })


@admin_required
def member_edit(request, pk):
    try:
        member = services.get_member(pk)
    except (NotFoundError, StoreUnavailable) as exc:
        messages.error(request, exc.message)
        return redirect('dashboard:member_list')

    form = MemberEditForm(
        request.POST or None,
        initial={'display_name': member.display_name, 'role': member.role},
    )
    if request.method == 'POST' and form.is_valid():
        try:
            member = services.update_member(pk, **form.cleaned_data)
        except ValidationError as exc:
            form.add_error(exc.field if exc.field in form.fields else None, exc.message)
        except NotFoundError as exc:
            messages.error(request, exc.message)
            return redirect('dashboard:member_list')
        except CoffeeChatError as exc:
            messages.error(request, exc.message)
        else:
            messages.success(request, f'Member "{member.display_name}" updated.')
            return redirect('dashboard:member_list')
    return render(request, 'dashboard/members/form.html', {
        'form':   form,
        'title':  f'Edit Member — {member.display_name}',
        'member': member,
        'page':   'members',
    })


@require_POST
@admin_required
def member_delete(request, pk):
    try:
        services.delete_member(pk, request.identity)
    except CoffeeChatError as exc:
        logger.warning('Admin %s could not delete member %s: %s', request.identity.id, pk, exc.message)
        messages.error(request, exc.message)
    else:
        messages.success(request, 'Member deleted.')
    return redirect('dashboard:member_list')
