"""
Access decorators.

Unauthenticated requests go to the login page with ?next= preserved.
Signed-in non-admins are sent back to their dashboard when they try the
admin console.
"""
from functools import wraps
from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect


def _to_login(request):
    return redirect(f'{settings.LOGIN_URL}?next={request.path}')


def member_required(view_func):
    """Require a signed-in identity of any role."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if getattr(request, 'identity', None) is None:
            return _to_login(request)
        return view_func(request, *args, **kwargs)
    return wrapper


def admin_required(view_func):
    """Require a signed-in identity with the admin role."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        identity = getattr(request, 'identity', None)
        if identity is None:
            return _to_login(request)
        if not identity.is_admin:
            messages.error(request, 'Admin access only.')
            return redirect('pages:dashboard')
        return view_func(request, *args, **kwargs)
    return wrapper
