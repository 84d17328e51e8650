"""
Slots app models:
  - DailySlotSet : the half-hour labels ("HH:MM") offered on one date
"""
from django.db import models
from apps.core.models import UUIDModel


class DailySlotSet(UUIDModel):
    """
    One row per calendar date. A date without a row offers nothing,
    exactly like a row with an empty list.
    """
    date = models.DateField(unique=True)
    slots = models.JSONField(default=list, blank=True)

    class Meta:
        verbose_name = 'Daily Slot Set'
        verbose_name_plural = 'Daily Slot Sets'
        ordering = ['date']

    def __str__(self):
        return f"{self.date}: {', '.join(self.slots) or 'no slots'}"
