"""
Expenses app services layer.

calculate_balances is a pure function; everything else reads or writes
the expense log through the ORM.
"""

from .exceptions import (
    ExpensesServiceError,
    ExpenseValidationError,
    PayerNotMemberError,
    NoMembersError,
)

from .balance_calculation import calculate_balances

from .expense_management import (
    add_expense,
    get_group_expenses,
    validate_expense_amount,
    validate_expense_title,
)

from .group_balances import (
    get_group_balances,
    summarize_group_expenses,
    list_user_balances,
    summarize_user_balances,
)


__all__ = [
    # Exceptions
    'ExpensesServiceError',
    'ExpenseValidationError',
    'PayerNotMemberError',
    'NoMembersError',

    # Balance Engine
    'calculate_balances',

    # Expense Management
    'add_expense',
    'get_group_expenses',
    'validate_expense_amount',
    'validate_expense_title',

    # Group Balances
    'get_group_balances',
    'summarize_group_expenses',
    'list_user_balances',
    'summarize_user_balances',
]
