from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Expense(models.Model):
    """
    One payment made by one member on behalf of a group.

    Expenses are append-only: nothing updates or deletes them, and a
    departed payer's expenses stay in the ledger.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    title = models.CharField(max_length=200)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Payer reference plus the name shown at the time of payment
    payer = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='expenses_paid'
    )
    payer_name = models.CharField(max_length=100, blank=True)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses_logged'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['group', 'created_at'], name='expenses_group_created_idx'),
            models.Index(fields=['payer', 'created_at'], name='expenses_payer_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} - {self.amount} ({self.payer_name or self.payer_id})"
