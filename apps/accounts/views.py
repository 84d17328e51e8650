"""Sign-in / sign-out views."""
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from apps.core.exceptions import CoffeeChatError
from .forms import LoginForm
from .session import SessionStore

logger = logging.getLogger(__name__)


def _safe_next(request, fallback):
    next_url = request.POST.get('next', '') or request.GET.get('next', '')
    if next_url and url_has_allowed_host_and_scheme(
        next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure(),
    ):
        return next_url
    return fallback


def login_view(request):
    """Sign in by display name. Already signed-in members go straight through."""
    if request.identity is not None:
        return redirect(_safe_next(request, 'pages:dashboard'))

    form = LoginForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            identity = SessionStore(request).sign_in(
                form.cleaned_data['display_name'],
                form.cleaned_data['password'],
            )
        except CoffeeChatError as exc:
            messages.error(request, exc.message)
        else:
            messages.success(request, f'Welcome, {identity.display_name}!')
            fallback = 'dashboard:overview' if identity.is_admin else 'pages:dashboard'
            return redirect(_safe_next(request, fallback))

    return render(request, 'accounts/login.html', {
        'form': form,
        'next': request.GET.get('next', ''),
    })


@require_POST
def logout_view(request):
    SessionStore(request).sign_out()
    messages.info(request, 'You have been signed out.')
    return redirect('accounts:login')
