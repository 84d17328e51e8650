from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils import timezone

from apps.accounts.decorators import member_required
from apps.bookings import ledger
from apps.bookings.stats import member_stats
from apps.core.exceptions import StoreUnavailable


def home(request):
    """Signed-in members land on their dashboard, everyone else on the login page."""
    identity = getattr(request, 'identity', None)
    if identity is None:
        return redirect('accounts:login')
    if identity.is_admin:
        return redirect('dashboard:overview')
    return redirect('pages:dashboard')


@member_required
def dashboard(request):
    """Upcoming coffee chats and a few counters for the signed-in member."""
    try:
        upcoming = ledger.list_upcoming(request.identity.id, timezone.localdate())
        stats = member_stats(request.identity.id)
    except StoreUnavailable as exc:
        messages.error(request, exc.message)
        upcoming, stats = [], None
    return render(request, 'pages/dashboard.html', {'upcoming': upcoming, 'stats': stats})


def error_404(request, exception=None):
    return render(request, '404.html', status=404)


def error_403(request, exception=None):
    return render(request, '403.html', status=403)


def error_500(request):
    return render(request, '500.html', status=500)
