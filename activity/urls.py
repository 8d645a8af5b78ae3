from django.urls import path
from . import views

urlpatterns = [
    path('logs/', views.list_logs, name='activity_logs'),
]
