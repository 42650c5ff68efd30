# ==========================================
# apps/expenses/admin.py
# ==========================================

from django.contrib import admin
from .models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """
    Read-only admin for the expense log.

    Expenses are append-only, so the admin can browse and search them
    but not edit or delete them.
    """

    list_display = [
        'title',
        'amount',
        'payer_name',
        'get_group_name',
        'created_at',
    ]

    list_filter = [
        'group',
        'created_at',
    ]

    search_fields = [
        'title',
        'payer_name',
        'payer__email',
        'group__name',
    ]

    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    readonly_fields = [
        'group',
        'title',
        'amount',
        'payer',
        'payer_name',
        'created_by',
        'created_at',
    ]

    def get_group_name(self, obj):
        return obj.group.name
    get_group_name.short_description = 'Group'
    get_group_name.admin_order_field = 'group__name'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'payer')
