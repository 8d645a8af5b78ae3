"""Utility functions for activity logging"""
import logging

from django.db import DatabaseError, transaction

from .models import ActivityLog

logger = logging.getLogger(__name__)


def log_activity(user, action, details=None):
    """
    Record an activity log entry

    Args:
        user: User performing the action (anonymous users are not logged)
        action: Action name (create_product, edit_product, checkout, ...)
        details: JSON-serialisable dictionary describing the action
    """
    if user is None or not user.is_authenticated:
        return None

    try:
        with transaction.atomic():
            return ActivityLog.objects.create(
                user=user,
                action=action,
                details=details or {},
            )
    except DatabaseError as e:
        # Don't fail the main operation if activity logging fails
        logger.error(f"Failed to log activity {action}: {str(e)}")
        return None
