import hashlib
import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from tracker.jwt_auth import set_auth_cookies, clear_auth_cookies
from utils.exceptions import Conflict
from ..serializers.user_serializers import (
    UserSerializer,
    LoginSerializer,
    RegisterSerializer,
    ForgotPasswordSerializer,
    ResetPasswordSerializer,
)
from ...models import UserProfile, Role

logger = logging.getLogger(__name__)

OTP_SENT_MESSAGE = "If account exists, OTP sent."


def hash_otp(otp):
    return hashlib.sha256(otp.encode()).hexdigest()


class AuthViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]  # applies to all actions in this viewset
    authentication_classes = []
    serializer_class = LoginSerializer

    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer})
    @action(detail=False, methods=["post"])
    def register(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        if User.objects.filter(email__iexact=email).exists():
            raise Conflict("Email is already registered")

        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=serializer.validated_data["password"],
            )
            UserProfile.objects.create(user=user, role=Role.EDITOR)

        logger.info(f"Registered user {user.id}")
        response = Response({"id": user.id, "email": user.email}, status=status.HTTP_201_CREATED)
        return set_auth_cookies(response, user)

    @extend_schema(request=LoginSerializer, responses={200: UserSerializer})
    @action(detail=False, methods=["post"])
    def login_with_email(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        # Find user by email
        find_user = User.objects.filter(email__iexact=email).first()
        if not find_user:
            return Response(
                {"error": "Invalid email or password"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        user = authenticate(request, username=find_user.username, password=serializer.validated_data["password"])
        if not user:
            return Response(
                {"error": "Invalid email or password"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        # Tokens go out as HttpOnly cookies, never in the body
        response = Response({"user": UserSerializer(user).data}, status=status.HTTP_200_OK)
        return set_auth_cookies(response, user)

    @action(detail=False, methods=["post"])
    def logout(self, request):
        response = Response({"message": "Successfully logged out"}, status=status.HTTP_200_OK)
        return clear_auth_cookies(response)

    @extend_schema(request=ForgotPasswordSerializer)
    @action(detail=False, methods=["post"])
    def forgot_password(self, request):
        """
        Issue a six digit one-time code for a password reset.

        The answer is the same whether or not the account exists.
        """
        serializer = ForgotPasswordSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"message": OTP_SENT_MESSAGE}, status=status.HTTP_200_OK)

        email = serializer.validated_data["email"].lower()
        user = User.objects.filter(email__iexact=email).first()

        if user:
            otp = str(secrets.randbelow(900000) + 100000)
            profile, _ = UserProfile.objects.get_or_create(user=user)
            profile.password_reset_otp = hash_otp(otp)
            profile.password_reset_expires = timezone.now() + timedelta(minutes=settings.PASSWORD_RESET_OTP_MINUTES)
            profile.save(update_fields=["password_reset_otp", "password_reset_expires"])

            send_mail(
                subject="Your Password Reset OTP",
                message=f"Your OTP is: {otp}\nThis OTP expires in {settings.PASSWORD_RESET_OTP_MINUTES} minutes.",
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
            )
            logger.info(f"Password reset OTP issued for user {user.id}")

        return Response({"message": OTP_SENT_MESSAGE}, status=status.HTTP_200_OK)

    @extend_schema(request=ResetPasswordSerializer)
    @action(detail=False, methods=["post"])
    def reset_password(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError({"non_field_errors": ["Invalid input"]})
        data = serializer.validated_data

        profile = (
            UserProfile.objects.select_related("user")
            .filter(
                user__email__iexact=data["email"],
                password_reset_otp=hash_otp(data["otp"]),
                password_reset_expires__gt=timezone.now(),
            )
            .first()
        )
        if not profile:
            raise ValidationError({"otp": ["Invalid or expired OTP"]})

        with transaction.atomic():
            profile.user.set_password(data["password"])
            profile.user.save(update_fields=["password"])
            profile.password_reset_otp = None
            profile.password_reset_expires = None
            profile.save(update_fields=["password_reset_otp", "password_reset_expires"])

        logger.info(f"Password reset for user {profile.user_id}")
        return Response({"message": "Password reset successful"}, status=status.HTTP_200_OK)


class MeViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer})
    def me(self, request):
        return Response(UserSerializer(request.user).data)
