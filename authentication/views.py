from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from django.contrib.auth.models import update_last_login
from django.shortcuts import get_object_or_404
import logging

from activity.utils import log_activity
from .permissions import IsAdmin
from .serializers import (
    LoginSerializer,
    UserProfileSerializer,
    UserCreateSerializer,
    ChangePasswordSerializer,
    ToggleUserStatusSerializer,
)
from .models import CustomUser

# Set up logging
logger = logging.getLogger(__name__)


def get_tokens_for_user(user):
    """
    Generate JWT tokens for a user
    """
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def revoke_tokens_for_user(user):
    """
    Blacklist every outstanding refresh token of a user
    """
    revoked = 0
    for token in OutstandingToken.objects.filter(user=user):
        _, created = BlacklistedToken.objects.get_or_create(token=token)
        if created:
            revoked += 1
    return revoked


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Login endpoint for admins and sellers
    POST /auth/login
    """
    serializer = LoginSerializer(data=request.data)

    if serializer.is_valid():
        user = serializer.validated_data['user']

        # Generate tokens
        tokens = get_tokens_for_user(user)

        # Update last login
        update_last_login(None, user)

        # Get user profile data
        profile_data = UserProfileSerializer(user).data

        logger.info(f"User logged in: {user.username} ({user.role})")

        return Response({
            'success': True,
            'message': 'Login successful',
            'user': profile_data,
            'tokens': tokens
        }, status=status.HTTP_200_OK)

    return Response({
        'success': False,
        'message': 'Invalid credentials',
        'errors': serializer.errors
    }, status=status.HTTP_401_UNAUTHORIZED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    """
    Get current user profile
    GET /auth/profile
    """
    profile_data = UserProfileSerializer(request.user).data
    return Response({
        'success': True,
        'user': profile_data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    """
    Change the current user's password
    POST /auth/profile/password
    """
    serializer = ChangePasswordSerializer(
        data=request.data,
        context={'user': request.user}
    )

    if serializer.is_valid():
        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password'])

        # Sessions opened with the old password must log in again
        revoke_tokens_for_user(user)

        logger.info(f"Password changed for user: {user.username}")

        return Response({
            'success': True,
            'message': 'Password updated successfully'
        })

    return Response({
        'success': False,
        'message': 'Invalid data provided',
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    Logout user by blacklisting refresh token
    POST /auth/logout
    """
    try:
        refresh_token = request.data.get('refresh_token')
        if refresh_token:
            token = RefreshToken(refresh_token)
            token.blacklist()  # Blacklist the refresh token

            logger.info(f"User logged out: {request.user.username}")

            return Response({
                'success': True,
                'message': 'Successfully logged out'
            }, status=status.HTTP_200_OK)
        else:
            return Response({
                'success': False,
                'message': 'Refresh token required'
            }, status=status.HTTP_400_BAD_REQUEST)

    except Exception as e:
        return Response({
            'success': False,
            'message': 'Logout failed',
            'error': str(e)
        }, status=status.HTTP_400_BAD_REQUEST)


# User administration

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def list_users(request):
    """
    List all accounts
    GET /auth/users
    """
    users = CustomUser.objects.order_by('first_name', 'last_name')
    serializer = UserProfileSerializer(users, many=True)
    return Response({
        'success': True,
        'count': users.count(),
        'users': serializer.data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def create_user(request):
    """
    Open a new admin or seller account
    POST /auth/users/new
    """
    serializer = UserCreateSerializer(data=request.data)

    if serializer.is_valid():
        try:
            user = serializer.save()

            log_activity(request.user, 'create_user', {
                'target_user_id': user.id,
                'role': user.role,
            })

            logger.info(f"New {user.role} account created: {user.username} by {request.user.username}")

            return Response({
                'success': True,
                'message': 'User created successfully',
                'user': UserProfileSerializer(user).data
            }, status=status.HTTP_201_CREATED)

        except Exception as e:
            logger.error(f"Error creating user: {str(e)}")
            return Response({
                'success': False,
                'message': 'Failed to create user',
                'error': str(e)
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': False,
        'message': 'Invalid data provided',
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def toggle_user_status(request, user_id):
    """
    Enable or disable an account
    POST /auth/users/<id>/toggle-status
    """
    target = get_object_or_404(CustomUser, id=user_id)

    if target.id == request.user.id:
        return Response({
            'success': False,
            'message': 'You cannot change the status of your own account'
        }, status=status.HTTP_400_BAD_REQUEST)

    serializer = ToggleUserStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'message': 'Invalid data provided',
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    action = serializer.validated_data.get('action')
    new_status = (action == 'enable') if action else not target.is_active

    try:
        target.is_active = new_status
        target.save(update_fields=['is_active'])

        if not new_status:
            revoke_tokens_for_user(target)

        log_activity(request.user, 'toggle_user_status', {
            'target_user_id': target.id,
            'new_status': new_status,
        })

        logger.info(f"Account {target.username} {'enabled' if new_status else 'disabled'} by {request.user.username}")

        return Response({
            'success': True,
            'message': f"User {'enabled' if new_status else 'disabled'} successfully",
            'user': UserProfileSerializer(target).data
        })

    except Exception as e:
        logger.error(f"Error toggling user status: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to update user status',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def delete_user(request, user_id):
    """
    Permanently delete an account
    DELETE /auth/users/<id>
    """
    target = get_object_or_404(CustomUser, id=user_id)

    if target.id == request.user.id:
        return Response({
            'success': False,
            'message': 'You cannot delete your own account'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        username = target.username
        target.delete()

        log_activity(request.user, 'delete_user', {'target_user_id': user_id})

        logger.info(f"Account deleted: {username} by {request.user.username}")

        return Response({
            'success': True,
            'message': 'User deleted successfully'
        })

    except Exception as e:
        logger.error(f"Error deleting user: {str(e)}")
        return Response({
            'success': False,
            'message': 'Failed to delete user',
            'error': str(e)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
