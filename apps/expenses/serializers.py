from rest_framework import serializers
from .models import Expense
from apps.groups.serializers import GroupListSerializer


# =============================================================================
# Input Serializers
# =============================================================================

class ExpenseCreateSerializer(serializers.Serializer):
    """
    Input for logging an expense.

    Title and amount are passed through as typed; the service trims,
    parses and rejects them. payer_id defaults to the requesting user.
    """

    title = serializers.CharField(max_length=200, allow_blank=True, trim_whitespace=False)
    amount = serializers.CharField(max_length=32)
    payer_id = serializers.UUIDField(required=False)
    payer_name = serializers.CharField(max_length=100, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class ExpenseSerializer(serializers.ModelSerializer):
    """Read-only expense record."""

    group_id = serializers.UUIDField(read_only=True)
    payer_id = serializers.UUIDField(read_only=True)
    created_by_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'group_id',
            'title',
            'amount',
            'payer_id',
            'payer_name',
            'created_by_id',
            'created_at',
        ]
        read_only_fields = fields


class MemberBalanceSerializer(serializers.Serializer):
    """One member's net position; positive means the group owes them."""

    user_id = serializers.UUIDField()
    display_name = serializers.CharField()
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class GroupBalancesSerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    balances = MemberBalanceSerializer(many=True)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    expense_count = serializers.IntegerField()
    member_count = serializers.IntegerField()
    share_per_member = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)


class UserGroupBalanceSerializer(serializers.Serializer):
    """The requesting user's balance in one of their groups."""

    group = GroupListSerializer()
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class UserBalancesSerializer(serializers.Serializer):
    """Per-group balances and their sum; negative total means the user owes overall."""

    total_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    groups = UserGroupBalanceSerializer(many=True)
