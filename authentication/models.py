from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_ADMIN = 'admin'
    ROLE_SELLER = 'seller'

    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Admin'),
        (ROLE_SELLER, 'Seller'),
    )

    role = models.CharField(
        max_length = 20,
        choices = ROLE_CHOICES,
        default = ROLE_SELLER,
        help_text = "User role: 'admin' manages users and settings, 'seller' runs the till"
    )

    phone_number = models.CharField(
        max_length = 15,
        blank = True,
        null = True,
        help_text = "User's phone number"
    )

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def is_admin(self):
        """Property to check if user is an admin"""
        return self.role == self.ROLE_ADMIN

    @property
    def full_name(self):
        """Returns user's full name"""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self):
        """Full name, falling back to the username"""
        return self.full_name or self.username

    class Meta:
        db_table = 'auth_custom_user'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['first_name', 'last_name']
