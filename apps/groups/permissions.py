from rest_framework import permissions

from .models import Group, GroupMembership


class IsGroupMember(permissions.BasePermission):
    """
    Permission: User must be a member of the group.
    """

    message = 'You must be a member of this group.'

    def has_object_permission(self, request, view, obj):
        # obj is a Group instance
        return obj.has_member(request.user)


class IsGroupCreator(permissions.BasePermission):
    """
    Permission: User must have created the group.
    """

    message = 'Only the group creator can perform this action.'

    def has_object_permission(self, request, view, obj):
        # obj is a Group instance
        return obj.is_creator(request.user)


class IsMemberOfRouteGroup(permissions.BasePermission):
    """
    Permission for nested routes: the user must belong to the group
    named by the ``group_id`` URL kwarg. Unknown groups pass here and
    are reported as 404 by the view.
    """

    message = 'You must be a member of this group.'

    def has_permission(self, request, view):
        group_id = view.kwargs.get('group_id')
        if group_id is None:
            return True
        if not Group.objects.filter(id=group_id).exists():
            return True
        return GroupMembership.objects.filter(group_id=group_id, user=request.user).exists()
