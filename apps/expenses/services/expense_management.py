"""
Expense management service.

Handles validation and creation of expense records. Expenses are
append-only; there is no update or delete path.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.expenses.models import Expense
from apps.groups.models import Group, GroupMembership
from apps.groups.services import GroupNotFoundError

from .exceptions import ExpenseValidationError, PayerNotMemberError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
# Expense.amount holds 12 digits, two of them after the point
MAX_AMOUNT = Decimal('10000000000')


def validate_expense_title(title) -> str:
    """Trim and require a non-empty title."""
    title = (title or '').strip() if isinstance(title, str) else ''
    if not title:
        raise ExpenseValidationError("Expense title is required")
    return title


def validate_expense_amount(amount) -> Decimal:
    """
    Parse an amount into a positive Decimal rounded to cents.

    Accepts Decimal, int, float or numeric strings.

    Raises:
        ExpenseValidationError: If the amount is non-numeric, not finite,
            or not greater than zero after rounding
    """
    if amount is None or isinstance(amount, bool):
        raise ExpenseValidationError("Amount must be a number")

    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ExpenseValidationError(f"Amount must be a number, got {amount!r}")

    if not value.is_finite():
        raise ExpenseValidationError("Amount must be a finite number")

    # Checked on both sides of rounding: quantize() overflows the decimal
    # context for huge values, and rounding can carry a value up to the limit.
    if abs(value) >= MAX_AMOUNT:
        raise ExpenseValidationError(f"Amount must be less than {MAX_AMOUNT}")

    value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    if abs(value) >= MAX_AMOUNT:
        raise ExpenseValidationError(f"Amount must be less than {MAX_AMOUNT}")
    if value <= 0:
        raise ExpenseValidationError("Amount must be greater than zero")

    return value


@transaction.atomic
def add_expense(
    *,
    group_id: UUID,
    title: str,
    amount,
    payer: User,
    payer_name: Optional[str] = None,
    created_by: Optional[User] = None
) -> Expense:
    """
    Record an expense paid by one member of the group.

    Args:
        group_id: UUID of the group
        title: What was paid for (trimmed, must not be empty)
        amount: Positive amount; rounded to cents
        payer: User who paid; must currently be a member
        payer_name: Name to show for the payer (defaults to the name
            captured on the payer's membership)
        created_by: User logging the expense, if different from payer

    Returns:
        Created Expense instance

    Raises:
        ExpenseValidationError: If title or amount is invalid
        GroupNotFoundError: If group doesn't exist
        PayerNotMemberError: If payer is not a current member
    """
    title = validate_expense_title(title)
    amount = validate_expense_amount(amount)

    try:
        group = Group.objects.get(id=group_id)
    except Group.DoesNotExist:
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    try:
        membership = GroupMembership.objects.get(group=group, user=payer)
    except GroupMembership.DoesNotExist:
        raise PayerNotMemberError(f"Payer is not a member of {group.name}")

    payer_name = (payer_name or '').strip() or membership.display_name or 'Unknown'

    expense = Expense.objects.create(
        group=group,
        title=title,
        amount=amount,
        payer=payer,
        payer_name=payer_name,
        created_by=created_by or payer,
    )

    logger.info(
        "Added expense %s (%s) to group %s paid by %s",
        expense.id, amount, group.id, payer.id
    )
    return expense


def get_group_expenses(*, group_id: UUID) -> QuerySet[Expense]:
    """
    Get a group's full expense log, newest first.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    if not Group.objects.filter(id=group_id).exists():
        raise GroupNotFoundError(f"Group with ID {group_id} not found")

    return (
        Expense.objects
        .filter(group_id=group_id)
        .select_related('payer')
        .order_by('-created_at')
    )
