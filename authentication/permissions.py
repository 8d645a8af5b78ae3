from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    """
    Custom permission to only allow admins to access certain views.
    """
    message = 'Access denied: admin rights required'

    def has_permission(self, request, view):
        # Check if user is authenticated and is an admin
        return (
            request.user.is_authenticated and
            request.user.role == 'admin'
        )


# Convenience function for use in function-based views
def is_admin(user):
    """Check if user is an admin"""
    return user.is_authenticated and user.role == 'admin'
