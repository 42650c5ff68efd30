from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import Group
from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupListSerializer,
    GroupMemberSerializer,
    JoinGroupSerializer,
    InviteCodeSerializer,
)
from .permissions import IsGroupMember

from apps.groups.services import (
    create_group,
    get_group_by_id,
    join_group,
    leave_group,
    get_group_members,
    regenerate_invite_code,
    # Exceptions
    GroupValidationError,
    GroupNotFoundError,
    InvalidInviteCodeError,
    InviteCodeConflictError,
    InviteCodeExhaustedError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)


class GroupPagination(PageNumberPagination):
    """Custom pagination for groups."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   viewsets.GenericViewSet):
    """
    ViewSet for groups.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Groups the user is a member of
    create: Create a new group (creator becomes first member)
    retrieve: Group details with roster (members only)
    """

    lookup_value_regex = '[0-9a-f-]{36}'
    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination

    def get_queryset(self):
        """Return only groups where user is a member."""
        return (
            Group.objects
            .filter(memberships__user=self.request.user)
            .select_related('created_by')
            .prefetch_related('memberships')
            .order_by('-created_at')
            .distinct()
        )

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return GroupListSerializer
        elif self.action == 'create':
            return GroupCreateSerializer
        elif self.action == 'join':
            return JoinGroupSerializer
        return GroupSerializer

    def create(self, request, *args, **kwargs):
        """Create a new group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = create_group(
                name=serializer.validated_data['name'],
                creator=request.user,
                description=serializer.validated_data.get('description', ''),
            )
        except GroupValidationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except InviteCodeExhaustedError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        group = get_group_by_id(group_id=group.id)
        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get the roster of the group in join order."""
        group = self.get_object()
        memberships = get_group_members(group_id=group.id)
        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @extend_schema(request=JoinGroupSerializer, responses={201: GroupSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join a group using its invite code."""
        serializer = JoinGroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = join_group(
                invite_code=serializer.validated_data['invite_code'],
                user=request.user,
            )
        except (GroupValidationError, InvalidInviteCodeError, AlreadyMemberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except InviteCodeConflictError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        group = get_group_by_id(group_id=membership.group_id)
        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        """Leave a group."""
        try:
            leave_group(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: InviteCodeSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsGroupMember])
    def regenerate_invite(self, request, pk=None):
        """Regenerate invite code (creator only)."""
        group = self.get_object()
        try:
            new_code = regenerate_invite_code(group_id=group.id, user=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InviteCodeExhaustedError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            'invite_code': new_code,
            'message': 'Invite code regenerated successfully'
        })
