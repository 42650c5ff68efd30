from functools import partial

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.groups.subscriptions import EXPENSES_TOPIC, registry

from .models import Expense


def load_group_expenses(group_id):
    return list(
        Expense.objects
        .filter(group_id=group_id)
        .order_by('-created_at')
    )


@receiver(post_save, sender=Expense)
def expense_created(sender, instance, created, **kwargs):
    if not created or not registry.has_subscribers(EXPENSES_TOPIC, instance.group_id):
        return
    transaction.on_commit(
        partial(
            registry.publish,
            EXPENSES_TOPIC,
            instance.group_id,
            partial(load_group_expenses, instance.group_id),
        )
    )
