from .session import SessionStore


class IdentityMiddleware:
    """Attach the session identity (or None) as request.identity."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.identity = SessionStore(request).current()
        return self.get_response(request)
