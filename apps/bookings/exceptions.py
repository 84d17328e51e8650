"""
Booking wizard exceptions.
Raised in wizard.py and caught in views.py for clean error handling.
"""
from apps.core.exceptions import CoffeeChatError, ValidationError


class WizardError(CoffeeChatError):
    """Base exception for wizard flow errors that are not input errors."""
    pass


class WizardBusy(WizardError):
    """Raised when a submit arrives while the member's previous submit is still running."""
    default_message = 'Your booking is already being submitted. Please wait a moment.'


class StaleDraft(WizardError):
    """Raised when a submit belongs to a draft that was reset or changed since it was shown."""
    default_message = 'Your booking selection changed in the meantime. Please review it again.'


class SlotUnavailable(ValidationError):
    """Raised when the chosen time is not (or no longer) free on the chosen date."""
    default_message = 'That time is no longer available. Please choose another.'


class BookingNotEditable(ValidationError):
    """Raised when a member tries to edit a booking that is not theirs, or is completed/cancelled."""
    default_message = 'This booking can no longer be changed.'
