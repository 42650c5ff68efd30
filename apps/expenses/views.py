from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.models import User
from apps.groups.permissions import IsMemberOfRouteGroup
from apps.groups.services import GroupNotFoundError, get_group_members

from .serializers import (
    ExpenseCreateSerializer,
    ExpenseSerializer,
    GroupBalancesSerializer,
    UserBalancesSerializer,
)
from .services import (
    add_expense,
    get_group_expenses,
    get_group_balances,
    summarize_group_expenses,
    summarize_user_balances,
    # Exceptions
    ExpenseValidationError,
    PayerNotMemberError,
    NoMembersError,
)


@extend_schema(
    request=ExpenseCreateSerializer,
    responses={200: ExpenseSerializer(many=True), 201: ExpenseSerializer},
    description="List a group's expenses (newest first) or log a new one.",
    tags=['expenses'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsMemberOfRouteGroup])
def group_expenses(request, group_id):
    """List or add expenses for a group."""
    if request.method == 'GET':
        try:
            expenses = get_group_expenses(group_id=group_id)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(ExpenseSerializer(expenses, many=True).data)

    serializer = ExpenseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    payer = request.user
    if 'payer_id' in data:
        payer = User.objects.filter(id=data['payer_id']).first()
        if payer is None:
            return Response(
                {'error': 'Payer is not a member of this group'},
                status=status.HTTP_400_BAD_REQUEST
            )

    try:
        expense = add_expense(
            group_id=group_id,
            title=data['title'],
            amount=data['amount'],
            payer=payer,
            payer_name=data.get('payer_name'),
            created_by=request.user,
        )
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (ExpenseValidationError, PayerNotMemberError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: GroupBalancesSerializer},
    description="Net balance per current member, recomputed from the full expense log.",
    tags=['expenses'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsMemberOfRouteGroup])
def group_balances(request, group_id):
    """Get balances and totals for a group."""
    try:
        memberships = get_group_members(group_id=group_id)
        balances = get_group_balances(group_id=group_id)
        summary = summarize_group_expenses(group_id=group_id)
    except GroupNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NoMembersError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    names = {m.user_id: m.display_name for m in memberships}
    data = {
        'group_id': group_id,
        'balances': [
            {
                'user_id': user_id,
                'display_name': names.get(user_id, ''),
                'balance': balance,
            }
            for user_id, balance in balances.items()
        ],
        **summary,
    }
    return Response(GroupBalancesSerializer(data).data)


@extend_schema(
    responses={200: UserBalancesSerializer},
    description="The current user's balance in each of their groups, newest group first, and the total across them.",
    tags=['expenses'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_balances(request):
    """Get the current user's balance per group."""
    summary = summarize_user_balances(user=request.user)
    serializer = UserBalancesSerializer(summary, context={'request': request})
    return Response(serializer.data)
