from functools import partial

from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import Group, GroupMembership
from .subscriptions import GROUP_TOPIC, registry


def load_group(group_id):
    return (
        Group.objects
        .prefetch_related('memberships')
        .filter(id=group_id)
        .first()
    )


def notify_group_changed(group_id):
    if not registry.has_subscribers(GROUP_TOPIC, group_id):
        return
    transaction.on_commit(
        partial(registry.publish, GROUP_TOPIC, group_id, partial(load_group, group_id))
    )


@receiver(post_save, sender=Group)
@receiver(post_delete, sender=Group)
def group_changed(sender, instance, **kwargs):
    notify_group_changed(instance.id)


@receiver(post_save, sender=GroupMembership)
@receiver(post_delete, sender=GroupMembership)
def membership_changed(sender, instance, **kwargs):
    notify_group_changed(instance.group_id)
