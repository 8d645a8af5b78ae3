from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from . import views

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('logout/', views.logout, name='logout'),

    # Current user
    path('profile/', views.user_profile, name='user_profile'),
    path('profile/password/', views.change_password, name='change_password'),

    # User administration
    path('users/', views.list_users, name='list_users'),
    path('users/new/', views.create_user, name='create_user'),
    path('users/<int:user_id>/toggle-status/', views.toggle_user_status, name='toggle_user_status'),
    path('users/<int:user_id>/', views.delete_user, name='delete_user'),
]
