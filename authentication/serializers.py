from rest_framework import serializers
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from .models import CustomUser


class LoginSerializer(serializers.Serializer):
    """
    Serializer for email/password login (admins and sellers alike)
    """
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        if email and password:
            account = CustomUser.objects.filter(email__iexact=email).first()

            # authenticate() refuses inactive accounts, so report them first
            if account and not account.is_active and account.check_password(password):
                raise serializers.ValidationError('User account is disabled')

            user = authenticate(
                username=account.username if account else email,
                password=password
            )

            if not user:
                raise serializers.ValidationError('Invalid email or password')

            attrs['user'] = user
            return attrs
        else:
            raise serializers.ValidationError('Must include email and password')


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for user profile data (for responses)
    """
    full_name = serializers.ReadOnlyField()
    is_admin = serializers.ReadOnlyField()

    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'email', 'first_name', 'last_name',
                 'full_name', 'phone_number', 'role', 'is_admin',
                 'is_active', 'date_joined', 'last_login']
        read_only_fields = ['id', 'username', 'role', 'is_active',
                            'date_joined', 'last_login']


class UserCreateSerializer(serializers.ModelSerializer):
    """
    Serializer used by admins to open a new account
    """
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        help_text="Password must meet Django's validation requirements"
    )
    role = serializers.ChoiceField(
        choices=CustomUser.ROLE_CHOICES,
        default=CustomUser.ROLE_SELLER
    )

    class Meta:
        model = CustomUser
        fields = ['email', 'password', 'role', 'first_name', 'last_name',
                  'phone_number']
        extra_kwargs = {
            'email': {'required': True},
            'first_name': {'required': True},
            'last_name': {'required': True},
        }

    def validate_email(self, value):
        """
        Check that email is unique
        """
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists")
        return value.lower()

    def create(self, validated_data):
        """
        Create user with hashed password, the email doubles as username
        """
        return CustomUser.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            first_name=validated_data.get('first_name', ''),
            last_name=validated_data.get('last_name', ''),
            phone_number=validated_data.get('phone_number', ''),
            role=validated_data['role'],
        )


class ChangePasswordSerializer(serializers.Serializer):
    """
    Serializer for changing the current user's password
    """
    new_password = serializers.CharField(write_only=True)
    new_password_confirm = serializers.CharField(write_only=True)

    def validate(self, attrs):
        """
        Validate that passwords match and pass the password validators
        """
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError("Passwords don't match")
        validate_password(attrs['new_password'], user=self.context.get('user'))
        return attrs


class ToggleUserStatusSerializer(serializers.Serializer):
    """
    Optional explicit action; without it the current status is inverted
    """
    action = serializers.ChoiceField(
        choices=['enable', 'disable'],
        required=False
    )
