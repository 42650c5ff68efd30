"""
Group balance queries.

Loads the current roster and the full expense log for a group and runs
them through calculate_balances. Nothing is cached or persisted: every
call recomputes from the stored expenses.
"""

from decimal import Decimal
from typing import Dict, List
from uuid import UUID

from django.db.models import Count, Sum

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.groups.models import Group, GroupMembership
from apps.groups.services import GroupNotFoundError, list_user_groups

from .balance_calculation import calculate_balances
from .exceptions import NoMembersError


def _get_group(group_id: UUID) -> Group:
    try:
        return Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


def _roster_ids(group_id: UUID) -> List[UUID]:
    return list(
        GroupMembership.objects
        .filter(group_id=group_id)
        .order_by('joined_at')
        .values_list('user_id', flat=True)
    )


def get_group_balances(*, group_id: UUID) -> Dict[UUID, Decimal]:
    """
    Net balance per current member of a group.

    Raises:
        GroupNotFoundError: If group doesn't exist
        NoMembersError: If the group has no members left
    """
    group = _get_group(group_id)
    expenses = Expense.objects.filter(group=group).only('amount', 'payer_id')
    return calculate_balances(expenses, _roster_ids(group.id))


def summarize_group_expenses(*, group_id: UUID) -> dict:
    """
    Totals shown next to a group's expense list.

    Returns:
        dict with ``total_amount``, ``expense_count``, ``member_count`` and
        ``share_per_member`` (None when the roster is empty)
    """
    group = _get_group(group_id)
    totals = Expense.objects.filter(group=group).aggregate(
        total=Sum('amount'),
        count=Count('id'),
    )
    total_amount = totals['total'] or Decimal('0.00')
    member_count = GroupMembership.objects.filter(group=group).count()

    return {
        'total_amount': total_amount,
        'expense_count': totals['count'],
        'member_count': member_count,
        'share_per_member': total_amount / member_count if member_count else None,
    }


def list_user_balances(*, user: User) -> List[dict]:
    """
    The user's own balance in each of their groups, newest group first.

    Returns:
        list of dicts with ``group`` and ``balance``
    """
    results = []
    for group in list_user_groups(user=user):
        try:
            balances = get_group_balances(group_id=group.id)
        except NoMembersError:
            # The user is a member, so the roster cannot be empty unless
            # they left between the two queries.
            continue
        results.append({
            'group': group,
            'balance': balances.get(user.id, Decimal('0')),
        })
    return results


def summarize_user_balances(*, user: User) -> dict:
    """
    The user's per-group balances plus their net position across all groups.

    Returns:
        dict with ``groups`` (as from list_user_balances) and ``total_balance``
    """
    groups = list_user_balances(user=user)
    return {
        'groups': groups,
        'total_balance': sum((row['balance'] for row in groups), Decimal('0')),
    }
