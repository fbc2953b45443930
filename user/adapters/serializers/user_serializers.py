from rest_framework import serializers
from django.contrib.auth.models import User

from user.models import Role


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()


class RegisterSerializer(serializers.Serializer):
    # doubles as the username, which Django caps at 150
    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(
        min_length=6,
        max_length=100,
        error_messages={
            'min_length': 'Password must be at least 6 characters long',
            'max_length': 'Password too long',
        },
    )

    def validate_email(self, value):
        return value.lower()


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.CharField(min_length=6, max_length=6)
    password = serializers.CharField(min_length=8)

    def validate_email(self, value):
        return value.lower()


class UserSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ('id', 'email', 'role')

    def get_role(self, obj):
        profile = getattr(obj, 'profile', None)
        return profile.role if profile is not None else Role.EDITOR
