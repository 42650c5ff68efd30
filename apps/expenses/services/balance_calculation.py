"""
Balance Calculation
===================

Derives each member's net balance from a group's expense log and its
current roster. Nothing here touches the database; callers pass in
whatever expenses and member ids they have loaded.

Every expense is split equally among the *current* roster:

    share = amount / len(members)
    payer        += amount
    every member -= share      (payer included, so payer nets amount - share)

Positive balances are owed to the member, negative balances are owed by
the member. With a stable roster and payers drawn from it, balances sum
to zero.

Example::

    >>> calculate_balances(expenses, [alice.id, bob.id, carol.id])
    {alice.id: Decimal('60.00'), bob.id: Decimal('-30.00'), carol.id: Decimal('-30.00')}

A payer who is no longer in the roster gets no entry in the result, so
their credit is dropped and the balances no longer sum to zero.
"""

from decimal import Decimal
from typing import Dict, Hashable, Iterable

from .exceptions import NoMembersError


def calculate_balances(expenses: Iterable, members: Iterable[Hashable]) -> Dict[Hashable, Decimal]:
    """
    Compute net balances for the given roster.

    Args:
        expenses: Iterable of objects with ``amount`` and ``payer_id``
        members: Current member ids, in display order

    Returns:
        dict mapping every member id to its signed Decimal balance,
        in roster order

    Raises:
        NoMembersError: If the roster is empty
    """
    balances = {member_id: Decimal('0') for member_id in members}
    if not balances:
        raise NoMembersError("Cannot split expenses among zero members")

    # Summing credits per payer and debiting total / n once equals the
    # per-expense debit of amount / n, and does not depend on order.
    total = Decimal('0')
    for expense in expenses:
        amount = Decimal(str(expense.amount))
        total += amount
        if expense.payer_id in balances:
            balances[expense.payer_id] += amount

    share = total / len(balances)
    for member_id in balances:
        balances[member_id] -= share

    return balances
