"""
Service layer tests for the expenses app.

Tests cover:
- Amount and title validation
- Payer membership checks
- Balances recomputed from the stored log
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.expenses.models import Expense
from apps.expenses.services import (
    add_expense,
    get_group_expenses,
    get_group_balances,
    summarize_group_expenses,
    list_user_balances,
    summarize_user_balances,
    validate_expense_amount,
    validate_expense_title,
)
from apps.expenses.services.exceptions import (
    ExpenseValidationError,
    PayerNotMemberError,
    NoMembersError,
)
from apps.groups.models import GroupMembership
from apps.groups.services import GroupNotFoundError, create_group, leave_group


# =============================================================================
# Validation
# =============================================================================

class TestValidation:

    @pytest.mark.parametrize('raw, expected', [
        ('12.5', Decimal('12.50')),
        (' 7 ', Decimal('7.00')),
        (3, Decimal('3.00')),
        (0.1, Decimal('0.10')),
        (Decimal('1.005'), Decimal('1.01')),
    ])
    def test_valid_amounts(self, raw, expected):
        assert validate_expense_amount(raw) == expected

    @pytest.mark.parametrize('raw', [
        None, True, '', 'abc', '0', '-5', '0.004', 'NaN', 'Infinity', '1e12',
        '9999999999.995', '1e40',
    ])
    def test_invalid_amounts(self, raw):
        with pytest.raises(ExpenseValidationError):
            validate_expense_amount(raw)

    def test_title_trimmed(self):
        assert validate_expense_title('  Rent ') == 'Rent'

    @pytest.mark.parametrize('raw', ['', '   ', None, 42])
    def test_invalid_titles(self, raw):
        with pytest.raises(ExpenseValidationError):
            validate_expense_title(raw)


# =============================================================================
# Expense Management
# =============================================================================

@pytest.mark.django_db
class TestAddExpense:

    def test_add_expense(self, group, alice):
        expense = add_expense(group_id=group.id, title=' Rent ', amount='900', payer=alice)

        assert expense.title == 'Rent'
        assert expense.amount == Decimal('900.00')
        assert expense.payer == alice
        assert expense.payer_name == 'Alice'
        assert expense.created_by == alice

    def test_add_expense_logged_by_someone_else(self, group, alice, bob):
        expense = add_expense(
            group_id=group.id,
            title='Groceries',
            amount='45.30',
            payer=bob,
            payer_name='Bobby',
            created_by=alice,
        )

        assert expense.payer == bob
        assert expense.payer_name == 'Bobby'
        assert expense.created_by == alice

    def test_invalid_amount_not_stored(self, group, alice):
        with pytest.raises(ExpenseValidationError):
            add_expense(group_id=group.id, title='Rent', amount='-1', payer=alice)

        assert Expense.objects.count() == 0

    def test_amount_rounding_past_limit_not_stored(self, group, alice):
        with pytest.raises(ExpenseValidationError):
            add_expense(group_id=group.id, title='Yacht', amount='9999999999.995', payer=alice)

        assert Expense.objects.count() == 0
        assert list(get_group_expenses(group_id=group.id)) == []

    def test_largest_amount_round_trips(self, group, alice):
        expense = add_expense(group_id=group.id, title='Yacht', amount='9999999999.994', payer=alice)

        expense.refresh_from_db()
        assert expense.amount == Decimal('9999999999.99')

    def test_blank_title_not_stored(self, group, alice):
        with pytest.raises(ExpenseValidationError):
            add_expense(group_id=group.id, title='  ', amount='10', payer=alice)

        assert Expense.objects.count() == 0

    def test_payer_must_be_member(self, group, outsider):
        with pytest.raises(PayerNotMemberError):
            add_expense(group_id=group.id, title='Sneaky', amount='10', payer=outsider)

        assert Expense.objects.count() == 0

    def test_unknown_group(self, alice):
        with pytest.raises(GroupNotFoundError):
            add_expense(group_id=uuid4(), title='Rent', amount='10', payer=alice)

    def test_get_group_expenses_newest_first(self, group, alice, bob):
        add_expense(group_id=group.id, title='First', amount='1', payer=alice)
        add_expense(group_id=group.id, title='Second', amount='2', payer=bob)

        titles = [e.title for e in get_group_expenses(group_id=group.id)]
        assert titles == ['Second', 'First']

    def test_get_group_expenses_unknown_group(self, db):
        with pytest.raises(GroupNotFoundError):
            get_group_expenses(group_id=uuid4())


# =============================================================================
# Group Balances
# =============================================================================

@pytest.mark.django_db
class TestGroupBalances:

    def test_balances_after_one_expense(self, group, alice, bob, carol):
        add_expense(group_id=group.id, title='Power', amount='90', payer=alice)

        balances = get_group_balances(group_id=group.id)

        assert balances == {
            alice.id: Decimal('60'),
            bob.id: Decimal('-30'),
            carol.id: Decimal('-30'),
        }
        assert list(balances) == [alice.id, bob.id, carol.id]

    def test_no_expenses(self, group, alice, bob, carol):
        balances = get_group_balances(group_id=group.id)
        assert set(balances.values()) == {Decimal('0')}

    def test_balances_recomputed_after_leave(self, group, alice, bob, carol):
        """Expenses are re-split over whoever is still in the group."""
        add_expense(group_id=group.id, title='Power', amount='90', payer=alice)
        leave_group(group_id=group.id, user=carol)

        balances = get_group_balances(group_id=group.id)

        assert balances == {alice.id: Decimal('45'), bob.id: Decimal('-45')}

    def test_departed_payer_keeps_expense_but_loses_credit(self, group, alice, bob, carol):
        add_expense(group_id=group.id, title='Power', amount='90', payer=carol)
        leave_group(group_id=group.id, user=carol)

        balances = get_group_balances(group_id=group.id)

        assert Expense.objects.filter(payer=carol).count() == 1
        assert carol.id not in balances
        assert balances == {alice.id: Decimal('-45'), bob.id: Decimal('-45')}

    def test_empty_group(self, group, alice, bob, carol):
        for user in (alice, bob, carol):
            leave_group(group_id=group.id, user=user)

        with pytest.raises(NoMembersError):
            get_group_balances(group_id=group.id)

    def test_unknown_group(self, db):
        with pytest.raises(GroupNotFoundError):
            get_group_balances(group_id=uuid4())

    def test_summary(self, group, alice, bob):
        add_expense(group_id=group.id, title='Power', amount='90', payer=alice)
        add_expense(group_id=group.id, title='Water', amount='30', payer=bob)

        summary = summarize_group_expenses(group_id=group.id)

        assert summary['total_amount'] == Decimal('120')
        assert summary['expense_count'] == 2
        assert summary['member_count'] == 3
        assert summary['share_per_member'] == Decimal('40')

    def test_summary_empty_group(self, group, alice, bob, carol):
        GroupMembership.objects.filter(group=group).delete()

        summary = summarize_group_expenses(group_id=group.id)

        assert summary['total_amount'] == Decimal('0')
        assert summary['member_count'] == 0
        assert summary['share_per_member'] is None

    def test_list_user_balances(self, group, alice, bob):
        other = create_group(name='Solo', creator=bob)
        add_expense(group_id=group.id, title='Power', amount='90', payer=alice)

        results = list_user_balances(user=bob)

        assert [r['group'] for r in results] == [other, group]
        assert results[0]['balance'] == Decimal('0')
        assert results[1]['balance'] == Decimal('-30')

    def test_summarize_user_balances_totals_groups(self, group, alice, bob, carol):
        trip = create_group(name='Trip', creator=carol)
        add_expense(group_id=group.id, title='Power', amount='90', payer=alice)
        add_expense(group_id=trip.id, title='Snacks', amount='12', payer=carol)

        summary = summarize_user_balances(user=carol)

        assert [row['group'] for row in summary['groups']] == [trip, group]
        assert summary['total_balance'] == Decimal('-30')

    def test_summarize_user_balances_no_groups(self, outsider):
        summary = summarize_user_balances(user=outsider)

        assert summary == {'groups': [], 'total_balance': Decimal('0')}
