"""
Member model — the signed-in identity.

The display name doubles as the login handle and is unique
(case-sensitive). Passwords go through Django's hashers; nothing is
stored in plain text.
"""
from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.models import PermissionsMixin
from django.db import models
from django.utils import timezone
from apps.core.models import UUIDModel


class Role(models.TextChoices):
    USER  = 'user',  'User'
    ADMIN = 'admin', 'Admin'


class MemberManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, display_name, password=None, role=Role.USER, **extra_fields):
        if not display_name:
            raise ValueError('Members must have a display name.')
        member = self.model(display_name=display_name, role=role, **extra_fields)
        member.set_password(password)
        member.save(using=self._db)
        return member

    def create_superuser(self, display_name, password=None, **extra_fields):
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(display_name, password, role=Role.ADMIN, **extra_fields)


class Member(UUIDModel, AbstractBaseUser, PermissionsMixin):
    display_name = models.CharField(max_length=80, unique=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER, db_index=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    objects = MemberManager()

    USERNAME_FIELD = 'display_name'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = 'Member'
        verbose_name_plural = 'Members'
        ordering = ['display_name']

    def __str__(self):
        return f"{self.display_name} ({self.role})"

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def is_staff(self):
        """Admins get into the stock Django admin site too."""
        return self.is_admin
