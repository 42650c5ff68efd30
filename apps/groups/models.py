# ==========================================
# apps/groups/models.py
# ==========================================

from django.db import models
import uuid


class Group(models.Model):
    """A named set of members sharing expenses, joined by invite code."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    invite_code = models.CharField(max_length=16, unique=True, db_index=True, editable=False)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='groups_creator_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def member_ids(self):
        """Member user ids in join order."""
        return [m.user_id for m in self.memberships.all()]

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()

    def is_creator(self, user):
        return self.created_by_id == getattr(user, 'id', None)


class GroupMembership(models.Model):
    """
    One member of a group.

    The row is both the roster entry (memberIds/memberDetails) and the
    user's personal group index entry. display_name and email are the
    user's identity as captured at join time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    display_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(max_length=255, blank=True)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_memberships'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['user', 'joined_at'], name='membership_user_joined_idx'),
            models.Index(fields=['group', 'joined_at'], name='membership_group_joined_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.display_name or self.user_id} in {self.group.name}"

    def save(self, *args, **kwargs):
        if self._state.adding:
            if not self.display_name:
                self.display_name = self.user.get_display_name()
            if not self.email:
                self.email = self.user.email or ''
        super().save(*args, **kwargs)
