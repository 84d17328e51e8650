"""
Bookings app models:
  - Booking : one reservation of a half-hour slot, with its lifecycle status
"""
from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel


time_label_validator = RegexValidator(
    r'^([01]\d|2[0-3]):[0-5]\d$', 'Enter a time as HH:MM.',
)


# ── Booking Status ────────────────────────────────────────────────────────────

class BookingStatus(models.TextChoices):
    PENDING   = 'pending',   'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


# Statuses that hold their slot and still accept date/time changes
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)
CLOSED_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


class Booking(UUIDModel, TimestampedModel):
    """
    Booking record. Stores the owner's display name as it was at booking
    time; slot conflicts are checked by the resolver, not by the table.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings',
    )
    user_name = models.CharField(max_length=80)
    user_phone = models.CharField(max_length=30, blank=True)

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='hosted_bookings',
    )
    host_name = models.CharField(max_length=80, blank=True)
    location = models.CharField(max_length=255, blank=True)

    date = models.DateField(db_index=True)
    time = models.CharField(max_length=5, validators=[time_label_validator])
    status = models.CharField(
        max_length=10, choices=BookingStatus.choices,
        default=BookingStatus.PENDING, db_index=True,
    )

    title = models.CharField(max_length=120, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-date', '-time']
        indexes = [
            models.Index(fields=['date', 'status'], name='booking_date_status_idx'),
        ]

    def __str__(self):
        return f"#{self.id_short} | {self.user_name} | {self.date} {self.time} [{self.status}]"

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    @property
    def status_badge_class(self):
        """CSS class for status badge."""
        classes = {
            'confirmed': 'badge-confirmed',
            'pending': 'badge-pending',
            'completed': 'badge-completed',
            'cancelled': 'badge-cancelled',
        }
        return classes.get(self.status, 'badge-pending')
