from django.db import models
from django.conf import settings


class Notification(models.Model):
    """
    In-app message for one user (low stock alerts, completed sales)
    """

    TYPE_LOW_STOCK = 'low_stock'
    TYPE_SALE = 'sale'
    TYPE_INFO = 'info'
    TYPE_WARNING = 'warning'

    TYPE_CHOICES = [
        (TYPE_LOW_STOCK, 'Low stock'),
        (TYPE_SALE, 'Sale'),
        (TYPE_INFO, 'Information'),
        (TYPE_WARNING, 'Warning'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )

    title = models.CharField(max_length=200)
    message = models.TextField()

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_INFO)

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.title} -> {self.user.username}"

    class Meta:
        db_table = 'notifications_notification'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
        ]
