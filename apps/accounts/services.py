"""
Member management — used by the admin console.

Public API:
  list_members()
  get_member(member_id)
  create_member(display_name, password, role)
  update_member(member_id, display_name, role)
  delete_member(member_id, acting_identity)

Display names are unique (case-sensitive). The check runs before any
write; the unique constraint on the column catches the rest.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError

from apps.core.exceptions import NotFoundError, StoreUnavailable, ValidationError
from .models import Member, Role

logger = logging.getLogger(__name__)


def _clean_name(display_name) -> str:
    name = (display_name or '').strip()
    if not name:
        raise ValidationError('Display name is required.', field='display_name')
    return name


def _clean_role(role) -> str:
    if role not in Role.values:
        raise ValidationError(f'Unknown role "{role}".', field='role')
    return role


def _ensure_name_free(name: str, exclude_id=None) -> None:
    qs = Member.objects.filter(display_name=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise ValidationError(
            'That display name is already taken. Please choose another.',
            field='display_name',
        )


def _get(member_id) -> Member:
    try:
        return Member.objects.get(pk=member_id)
    except (Member.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFoundError('Member not found.')


def list_members():
    try:
        return list(Member.objects.order_by('display_name'))
    except DatabaseError as exc:
        logger.exception('Failed to list members')
        raise StoreUnavailable() from exc


def get_member(member_id) -> Member:
    try:
        return _get(member_id)
    except DatabaseError as exc:
        logger.exception('Failed to load member %s', member_id)
        raise StoreUnavailable() from exc


def create_member(display_name: str, password: str, role: str = Role.USER) -> Member:
    name = _clean_name(display_name)
    role = _clean_role(role)
    if not password:
        raise ValidationError('Password is required.', field='password')

    try:
        _ensure_name_free(name)
        member = Member.objects.create_user(name, password, role=role)
    except IntegrityError as exc:
        raise ValidationError(
            'That display name is already taken. Please choose another.',
            field='display_name',
        ) from exc
    except DatabaseError as exc:
        logger.exception('Failed to create member %r', name)
        raise StoreUnavailable() from exc

    logger.info('Member %s (%s) created', member.pk, role)
    return member


def update_member(member_id, display_name: str, role: str) -> Member:
    name = _clean_name(display_name)
    role = _clean_role(role)

    try:
        member = _get(member_id)
        _ensure_name_free(name, exclude_id=member.pk)
        member.display_name = name
        member.role = role
        member.save(update_fields=['display_name', 'role'])
    except IntegrityError as exc:
        raise ValidationError(
            'That display name is already taken. Please choose another.',
            field='display_name',
        ) from exc
    except DatabaseError as exc:
        logger.exception('Failed to update member %s', member_id)
        raise StoreUnavailable() from exc

    logger.info('Member %s updated', member.pk)
    return member


def delete_member(member_id, acting_identity) -> None:
    """Irreversible. The signed-in admin can never delete themselves."""
    if acting_identity is not None and str(member_id) == acting_identity.id:
        raise ValidationError('You cannot delete your own account.')

    try:
        member = _get(member_id)
        member.delete()
    except DatabaseError as exc:
        logger.exception('Failed to delete member %s', member_id)
        raise StoreUnavailable() from exc

    logger.info('Member %s deleted by %s', member_id, getattr(acting_identity, 'id', None))
