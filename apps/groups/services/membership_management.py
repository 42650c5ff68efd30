"""
Membership management service.

Handles group membership operations with concurrency protection.
"""

import logging
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership

from .exceptions import (
    GroupNotFoundError,
    AlreadyMemberError,
    NotMemberError,
)
from .invite_management import resolve_invite_code

logger = logging.getLogger(__name__)


@transaction.atomic
def join_group(*, invite_code: str, user: User) -> GroupMembership:
    """
    Join a group using its invite code.

    The matched group row is locked so concurrent joins are serialized
    and neither membership is lost.

    Args:
        invite_code: Invite code as typed (case-insensitive)
        user: User joining the group

    Returns:
        Created GroupMembership instance

    Raises:
        GroupValidationError: If the code is blank
        InvalidInviteCodeError: If no group uses the code
        InviteCodeConflictError: If the code matches more than one group
        AlreadyMemberError: If user is already a member
    """
    group = resolve_invite_code(invite_code=invite_code, for_update=True)

    if group.has_member(user):
        raise AlreadyMemberError(f"User is already a member of {group.name}")

    try:
        with transaction.atomic():
            membership = GroupMembership.objects.create(
                user=user,
                group=group,
            )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError(f"User is already a member of {group.name}")

    group.save(update_fields=['updated_at'])

    logger.info("User %s joined group %s", user.id, group.id)
    return membership


@transaction.atomic
def leave_group(*, group_id: UUID, user: User) -> None:
    """
    Leave a group.

    Removes the user from the roster and from their personal group index.
    Expenses the user paid stay in the ledger untouched.

    Args:
        group_id: UUID of the group
        user: User leaving the group

    Raises:
        GroupNotFoundError: If group doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        group = (
            Group.objects
            .select_for_update()
            .get(id=group_id)
        )
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    deleted, _ = GroupMembership.objects.filter(user=user, group=group).delete()
    if not deleted:
        raise NotMemberError(f"User is not a member of {group.name}")

    group.save(update_fields=['updated_at'])

    logger.info("User %s left group %s", user.id, group.id)


def get_group_members(*, group_id: UUID) -> QuerySet[GroupMembership]:
    """
    Get the current roster of a group in join order.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        GroupMembership.objects
        .filter(group_id=group_id)
        .select_related('user')
        .order_by('joined_at')
    )


def require_membership(*, group: Group, user: User) -> GroupMembership:
    """
    Return the user's membership in the group.

    Raises:
        NotMemberError: If user is not a member
    """
    try:
        return GroupMembership.objects.get(group=group, user=user)
    except GroupMembership.DoesNotExist:
        raise NotMemberError(f"User is not a member of {group.name}")
