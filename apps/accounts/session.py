"""
Session store for the signed-in identity.

The identity is a point-in-time snapshot written on sign-in and stored in
request.session['identity']:
{
    "id":           "<uuid>",
    "display_name": "...",
    "role":         "user" | "admin",
}

Renames or role changes made by an admin show up on the member's next
sign-in. Use SessionStore instead of touching session['identity'] directly.
"""
import logging
from dataclasses import asdict, dataclass

from django.contrib.auth import authenticate
from django.db import DatabaseError

from apps.core.exceptions import InvalidCredentials, StoreUnavailable
from .models import Role

logger = logging.getLogger(__name__)

SESSION_KEY = 'identity'


@dataclass(frozen=True)
class Identity:
    id: str
    display_name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_member(cls, member) -> 'Identity':
        return cls(id=str(member.pk), display_name=member.display_name, role=member.role)

    @classmethod
    def from_dict(cls, data):
        """Rebuild from session data. Returns None for anything malformed."""
        if not isinstance(data, dict):
            return None
        try:
            identity = cls(id=data['id'], display_name=data['display_name'], role=data['role'])
        except (KeyError, TypeError):
            return None
        if not all(isinstance(v, str) and v for v in asdict(identity).values()):
            return None
        if identity.role not in Role.values:
            return None
        return identity

    def as_dict(self) -> dict:
        return asdict(self)


class SessionStore:
    """Sign-in, sign-out and the current identity for one request."""

    def __init__(self, request):
        self.request = request

    def sign_in(self, display_name: str, password: str) -> Identity:
        if not display_name or not password:
            raise InvalidCredentials()
        try:
            member = authenticate(self.request, username=display_name, password=password)
        except DatabaseError as exc:
            logger.exception('Sign-in lookup failed')
            raise StoreUnavailable() from exc

        if member is None:
            logger.warning('Sign-in failed for display name %r', display_name)
            raise InvalidCredentials()

        identity = Identity.from_member(member)
        self.request.session.cycle_key()
        self.request.session[SESSION_KEY] = identity.as_dict()
        logger.info('Member %s signed in', identity.id)
        return identity

    def sign_out(self) -> None:
        self.request.session.pop(SESSION_KEY, None)
        self.request.session.cycle_key()

    def current(self):
        raw = self.request.session.get(SESSION_KEY)
        if raw is None:
            return None
        identity = Identity.from_dict(raw)
        if identity is None:
            # Corrupt snapshot: start unauthenticated
            self.request.session.pop(SESSION_KEY, None)
        return identity
