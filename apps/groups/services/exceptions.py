"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupValidationError(GroupsServiceError):
    """Raised when caller-supplied group data is invalid (empty name, empty code)."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist or is inaccessible."""
    pass


class InvalidInviteCodeError(GroupsServiceError):
    """Raised when an invite code matches no group."""
    pass


class InviteCodeConflictError(GroupsServiceError):
    """Raised when an invite code resolves to more than one group."""
    pass


class InviteCodeExhaustedError(GroupsServiceError):
    """Raised when no unused invite code could be issued within the retry budget."""
    pass


class AlreadyMemberError(GroupsServiceError):
    """Raised when a user tries to join a group they're already in."""
    pass


class NotMemberError(GroupsServiceError):
    """Raised when a user tries to perform an action requiring membership."""
    pass


class InsufficientPermissionsError(GroupsServiceError):
    """Raised when a user lacks required permissions for an action."""
    pass
