"""
Core base model mixins.
All production models should inherit from these.
"""
import uuid
from django.db import models
from django.utils import timezone


class UUIDModel(models.Model):
    """Primary key is a UUID, not an auto-incrementing integer."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """
    Tracks creation time, and the time of the last explicit update.

    updated_at stays NULL until touch() is called, so a freshly created
    record can be told apart from an edited one.
    """
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(null=True, blank=True, editable=False)

    class Meta:
        abstract = True

    def touch(self):
        self.updated_at = timezone.now()
