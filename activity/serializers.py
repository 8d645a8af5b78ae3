from rest_framework import serializers
from .models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    """
    Serializer for activity log entries
    """
    author = serializers.ReadOnlyField(source='author_name')
    action_label = serializers.ReadOnlyField()
    summary = serializers.ReadOnlyField()

    class Meta:
        model = ActivityLog
        fields = [
            'id', 'user', 'author', 'action', 'action_label',
            'details', 'summary', 'timestamp'
        ]
