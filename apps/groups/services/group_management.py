"""
Group management service.

Handles group creation and lookup with proper transaction safety.
"""

import logging
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import Prefetch, QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership

from .exceptions import (
    GroupNotFoundError,
    GroupValidationError,
    InviteCodeExhaustedError,
)
from .invite_management import issue_invite_code

logger = logging.getLogger(__name__)


def create_group(
    *,
    name: str,
    creator: User,
    description: str = '',
    max_retries: int = None
) -> Group:
    """
    Create a new group and add the creator as its first member.

    This is a multi-step operation wrapped in a transaction:
    1. Issue an unused invite code
    2. Create the group
    3. Create the creator's membership (also their personal index entry)

    Args:
        name: Group name (trimmed, must not be empty)
        creator: User creating the group
        description: Optional group description
        max_retries: Total invite code candidates to try

    Returns:
        Created Group instance

    Raises:
        GroupValidationError: If name is empty
        InviteCodeExhaustedError: If cannot obtain a unique invite code
    """
    name = (name or '').strip()
    if not name:
        raise GroupValidationError("Group name is required")
    description = (description or '').strip()

    if max_retries is None:
        max_retries = getattr(settings, 'INVITE_CODE_MAX_RETRIES', 5)

    # Each attempt tries one candidate code. A candidate fails either the
    # existence check or, when a concurrent insert takes it first, the
    # unique constraint.
    for attempt in range(max_retries):
        try:
            invite_code = issue_invite_code(max_retries=1)
        except InviteCodeExhaustedError:
            continue

        try:
            with transaction.atomic():
                group = Group.objects.create(
                    name=name,
                    description=description,
                    created_by=creator,
                    invite_code=invite_code
                )

                GroupMembership.objects.create(
                    user=creator,
                    group=group,
                )
        except IntegrityError:
            logger.warning(
                "Invite code %s taken concurrently (attempt %d/%d)",
                invite_code, attempt + 1, max_retries
            )
            continue

        logger.info("Created group %s by user %s", group.id, creator.id)
        return group

    raise InviteCodeExhaustedError(
        f"Failed to generate unique invite code after {max_retries} attempts"
    )


def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its roster prefetched.

    Args:
        group_id: UUID of the group

    Returns:
        Group instance

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return (
            Group.objects
            .select_related('created_by')
            .prefetch_related(
                Prefetch(
                    'memberships',
                    queryset=GroupMembership.objects.select_related('user')
                )
            )
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def list_user_groups(*, user: User) -> QuerySet[Group]:
    """Groups the user currently belongs to, newest first."""
    return (
        Group.objects
        .filter(memberships__user=user)
        .select_related('created_by')
        .prefetch_related('memberships')
        .order_by('-created_at')
        .distinct()
    )
