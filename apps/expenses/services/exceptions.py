"""
Domain-specific exceptions for expenses app.

Group lookups reuse GroupNotFoundError from the groups app.
"""


class ExpensesServiceError(Exception):
    """Base exception for all expenses service errors."""
    pass


class ExpenseValidationError(ExpensesServiceError):
    """Raised when an expense title or amount is invalid."""
    pass


class PayerNotMemberError(ExpensesServiceError):
    """Raised when the payer of a new expense is not a current group member."""
    pass


class NoMembersError(ExpensesServiceError):
    """Raised when balances are requested for an empty roster."""
    pass
