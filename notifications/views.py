from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
import logging

from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger(__name__)

LATEST_LIMIT = 20


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_notifications(request):
    """
    Latest notifications of the current user
    GET /notifications/
    """
    notifications = Notification.objects.filter(user=request.user)
    serializer = NotificationSerializer(notifications[:LATEST_LIMIT], many=True)

    return Response({
        'success': True,
        'unread_count': notifications.filter(is_read=False).count(),
        'notifications': serializer.data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_read(request, notification_id):
    """
    POST /notifications/<id>/read/
    """
    notification = get_object_or_404(Notification, id=notification_id, user=request.user)

    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])

    return Response({
        'success': True,
        'notification': NotificationSerializer(notification).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_all_read(request):
    """
    POST /notifications/read-all/
    """
    updated = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)

    logger.info(f"{updated} notification(s) marked read by {request.user.username}")

    return Response({
        'success': True,
        'updated': updated
    })
