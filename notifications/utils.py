import logging

from django.contrib.auth import get_user_model

from .models import Notification

logger = logging.getLogger(__name__)


def create_notification(user, title, message, type=Notification.TYPE_INFO):
    return Notification.objects.create(user=user, title=title, message=message, type=type)


def notify_admins(title, message, type=Notification.TYPE_INFO, exclude=None):
    """
    Send the same notification to every active admin.
    `exclude` is a user (usually the one who triggered the event).
    Returns the number of notifications created.
    """
    User = get_user_model()
    admins = User.objects.filter(role=User.ROLE_ADMIN, is_active=True)
    if exclude is not None:
        admins = admins.exclude(pk=exclude.pk)

    notifications = Notification.objects.bulk_create([
        Notification(user=admin, title=title, message=message, type=type)
        for admin in admins
    ])

    logger.info(f"Notification '{title}' sent to {len(notifications)} admin(s)")
    return len(notifications)
