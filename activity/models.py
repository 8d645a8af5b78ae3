import json

from django.db import models
from django.conf import settings


class ActivityLog(models.Model):
    """
    Journal of user actions (who did what, with which details)
    """

    ACTION_CHOICES = [
        ('create_product', 'Product Created'),
        ('edit_product', 'Product Edited'),
        ('restock_product', 'Product Restocked'),
        ('archive_product', 'Product Archived'),
        ('unarchive_product', 'Product Restored'),
        ('delete_product', 'Product Deleted'),
        ('create_category', 'Category Created'),
        ('checkout', 'Sale Checkout'),
        ('create_user', 'User Created'),
        ('toggle_user_status', 'User Status Changed'),
        ('delete_user', 'User Deleted'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activity_logs',
        help_text="User who performed the action"
    )

    action = models.CharField(max_length=50, choices=ACTION_CHOICES)

    details = models.JSONField(default=dict, blank=True)

    timestamp = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} by {self.author_name} at {self.timestamp}"

    @property
    def author_name(self):
        if self.user is None:
            return 'System'
        return self.user.display_name

    @property
    def action_label(self):
        return self.get_action_display()

    @property
    def summary(self):
        """One-line human description built from the details"""
        details = self.details or {}

        if self.action in ('archive_product', 'unarchive_product', 'delete_product'):
            return f"Product: {details.get('name') or details.get('product_id')}"
        if self.action == 'create_product':
            return f"Product: {details.get('name')} (initial stock: {details.get('quantity', 0)})"
        if self.action == 'edit_product':
            diff = details.get('stock_diff', 0) or 0
            sign = '+' if diff > 0 else ''
            return f"Product: {details.get('name') or details.get('product_id')} (Diff: {sign}{diff})"
        if self.action == 'restock_product':
            return f"Product: {details.get('name') or details.get('product_id')} (+{details.get('added')})"
        if self.action == 'checkout':
            return f"Sale {details.get('reference')}: {details.get('total')} ({details.get('item_count')} items)"
        if self.action == 'create_user':
            return f"User: {details.get('target_user_id')} (role: {details.get('role')})"
        if self.action == 'toggle_user_status':
            state = 'Active' if details.get('new_status') else 'Disabled'
            return f"User: {details.get('target_user_id')} (Status: {state})"
        if self.action == 'delete_user':
            return f"Target user: {details.get('target_user_id')}"

        return json.dumps(details, default=str)

    class Meta:
        db_table = 'activity_log'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['action'], name='activity_log_action_idx'),
            models.Index(fields=['timestamp'], name='activity_log_time_idx'),
        ]
