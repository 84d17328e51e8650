"""
Error taxonomy shared by every app.
Raised in the domain modules (session, registry, ledger, wizard) and caught
in views, where each one becomes a flash message.
"""


class CoffeeChatError(Exception):
    """Base exception for all domain errors."""
    default_message = 'Something went wrong. Please try again.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return self.args[0]


class InvalidCredentials(CoffeeChatError):
    """Sign-in failed. Never says whether the name or the password was wrong."""
    default_message = 'Invalid name or password.'


class ValidationError(CoffeeChatError):
    """A required field is missing or malformed; the store was not touched."""
    default_message = 'Please check the submitted values.'

    def __init__(self, message=None, field=None):
        super().__init__(message)
        self.field = field


class NotFoundError(CoffeeChatError):
    """Update/delete target does not exist (anymore)."""
    default_message = 'The requested record no longer exists.'


class StoreUnavailable(CoffeeChatError):
    """The database failed. Operation abandoned, no automatic retry."""
    default_message = 'The service is temporarily unavailable. Please try again later.'
