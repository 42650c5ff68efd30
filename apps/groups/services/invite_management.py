"""
Invite management service.

Issues short, human-shareable invite codes and resolves them back to
groups. Codes are drawn uniformly from 36 symbols (A-Z, 0-9), giving a
36^6 keyspace at the default length of six.
"""

import logging
import secrets
import string
from uuid import UUID

from django.conf import settings
from django.db import transaction

from apps.accounts.models import User
from apps.groups.models import Group

from .exceptions import (
    GroupNotFoundError,
    GroupValidationError,
    InsufficientPermissionsError,
    InvalidInviteCodeError,
    InviteCodeConflictError,
    InviteCodeExhaustedError,
)

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code(length: int = None) -> str:
    """Return a random code; no uniqueness check is made here."""
    if length is None:
        length = getattr(settings, 'INVITE_CODE_LENGTH', 6)
    return ''.join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def normalize_invite_code(invite_code: str) -> str:
    """
    Normalize a user-typed invite code for lookup.

    Raises:
        GroupValidationError: If the code is missing or blank
    """
    code = (invite_code or '').strip().upper()
    if not code:
        raise GroupValidationError("Invite code is required")
    return code


def issue_invite_code(*, max_retries: int = None) -> str:
    """
    Issue an invite code not used by any existing group.

    Generates a candidate, checks the store for an existing group with
    the same code, and regenerates on collision.

    Args:
        max_retries: Maximum number of candidates to try
            (defaults to settings.INVITE_CODE_MAX_RETRIES)

    Returns:
        An unused invite code

    Raises:
        InviteCodeExhaustedError: If every candidate collided
    """
    if max_retries is None:
        max_retries = getattr(settings, 'INVITE_CODE_MAX_RETRIES', 5)

    for attempt in range(max_retries):
        code = generate_invite_code()
        if not Group.objects.filter(invite_code=code).exists():
            return code
        logger.warning(
            "Invite code collision on attempt %d/%d", attempt + 1, max_retries
        )

    raise InviteCodeExhaustedError(
        f"Failed to generate unique invite code after {max_retries} attempts"
    )


def resolve_invite_code(*, invite_code: str, for_update: bool = False) -> Group:
    """
    Resolve an invite code to exactly one group.

    Lookup is case-insensitive: the code is normalized to uppercase first.

    Args:
        invite_code: Code as typed by the user
        for_update: Lock the matched group row (caller must be in a transaction)

    Returns:
        The matching Group

    Raises:
        GroupValidationError: If the code is blank
        InvalidInviteCodeError: If no group uses the code
        InviteCodeConflictError: If more than one group uses the code
    """
    code = normalize_invite_code(invite_code)

    queryset = Group.objects.filter(invite_code=code)
    if for_update:
        queryset = queryset.select_for_update()

    matches = list(queryset[:2])
    if not matches:
        raise InvalidInviteCodeError("Invalid invite code")
    if len(matches) > 1:
        logger.error("Invite code %s resolves to more than one group", code)
        raise InviteCodeConflictError(
            f"Invite code {code} is shared by more than one group"
        )
    return matches[0]


@transaction.atomic
def regenerate_invite_code(
    *,
    group_id: UUID,
    user: User,
    max_retries: int = None
) -> str:
    """
    Replace a group's invite code (group creator only).

    The old code stops working immediately.

    Args:
        group_id: UUID of the group
        user: User requesting regeneration (must be the creator)
        max_retries: Maximum attempts to find an unused code

    Returns:
        New invite code

    Raises:
        GroupNotFoundError: If group doesn't exist
        InsufficientPermissionsError: If user is not the creator
        InviteCodeExhaustedError: If no unused code could be issued
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    if not group.is_creator(user):
        raise InsufficientPermissionsError("Only the group creator can regenerate the invite code")

    group.invite_code = issue_invite_code(max_retries=max_retries)
    group.save(update_fields=['invite_code', 'updated_at'])

    logger.info("Regenerated invite code for group %s", group.id)
    return group.invite_code
