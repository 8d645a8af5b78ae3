from django.urls import path
from . import views

urlpatterns = [
    path('', views.list_notifications, name='list_notifications'),
    path('<int:notification_id>/read/', views.mark_read, name='mark_notification_read'),
    path('read-all/', views.mark_all_read, name='mark_all_notifications_read'),
]
