from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from rest_framework.exceptions import NotFound
from django.db.models import Q, Value
from django.db.models.functions import Concat
import logging

from authentication.permissions import IsAdmin
from .models import ActivityLog
from .serializers import ActivityLogSerializer

logger = logging.getLogger(__name__)


class ActivityPagination(PageNumberPagination):
    """
    Custom pagination for the activity journal
    """
    page_size = 6
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'pagination': {
                'count': self.page.paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'current_page': self.page.number,
                'total_pages': self.page.paginator.num_pages,
                'page_size': self.get_page_size(self.request)
            },
            'actions': [
                {'value': value, 'label': label}
                for value, label in ActivityLog.ACTION_CHOICES
            ],
            'logs': data
        })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def list_logs(request):
    """
    Activity journal with search, action filter and pagination
    GET /activity/logs
    GET /activity/logs?search=restock
    GET /activity/logs?action=delete_user
    """
    try:
        logs = ActivityLog.objects.select_related('user').annotate(
            author_full_name=Concat('user__first_name', Value(' '), 'user__last_name')
        )

        search = request.GET.get('search', '').strip()
        if search:
            logs = logs.filter(
                Q(action__icontains=search) |
                Q(author_full_name__icontains=search)
            )

        action = request.GET.get('action')
        if action and action != 'all':
            logs = logs.filter(action=action)

        logs = logs.order_by('-timestamp', '-id')

        paginator = ActivityPagination()
        page = paginator.paginate_queryset(logs, request)
        serializer = ActivityLogSerializer(page, many=True)

        return paginator.get_paginated_response(serializer.data)

    except NotFound:
        raise

    except Exception as e:
        logger.error(f"Error retrieving activity logs: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to retrieve activity logs',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
