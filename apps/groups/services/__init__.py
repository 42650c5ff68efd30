"""
Groups app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    GroupsServiceError,
    GroupValidationError,
    GroupNotFoundError,
    InvalidInviteCodeError,
    InviteCodeConflictError,
    InviteCodeExhaustedError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)

from .group_management import (
    create_group,
    get_group_by_id,
    list_user_groups,
)

from .membership_management import (
    join_group,
    leave_group,
    get_group_members,
    require_membership,
)

from .invite_management import (
    generate_invite_code,
    normalize_invite_code,
    issue_invite_code,
    resolve_invite_code,
    regenerate_invite_code,
)


__all__ = [
    # Exceptions
    'GroupsServiceError',
    'GroupValidationError',
    'GroupNotFoundError',
    'InvalidInviteCodeError',
    'InviteCodeConflictError',
    'InviteCodeExhaustedError',
    'AlreadyMemberError',
    'NotMemberError',
    'InsufficientPermissionsError',

    # Group Management
    'create_group',
    'get_group_by_id',
    'list_user_groups',

    # Membership Management
    'join_group',
    'leave_group',
    'get_group_members',
    'require_membership',

    # Invite Management
    'generate_invite_code',
    'normalize_invite_code',
    'issue_invite_code',
    'resolve_invite_code',
    'regenerate_invite_code',
]
