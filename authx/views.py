import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.throttling import ScopedRateThrottle
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import InvalidState, Unauthorized
from events.clock import now as clock_now
from events.emails import build_frontend_url
from events.tasks import notify_password_reset
from users.serializers import UserSerializer
from .serializers import (
    ForgotPasswordSerializer,
    LoginSerializer,
    ResetPasswordSerializer,
    SignupSerializer,
)

logger = logging.getLogger("cos.users")

User = get_user_model()

INVALID_CREDENTIALS = "Invalid credentials."
SOCIAL_ACCOUNT = "This account uses Google Sign-In. Please log in with Google."
RESET_SENT = "If an account with that email exists, a password reset link has been sent."
RESET_INVALID = "Password reset token is invalid or has expired."


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class SignupView(APIView):
    # allow unauthenticated
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Account created: user={user.id}")
        return Response(
            {"message": "User created successfully", "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    # allow unauthenticated
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(email__iexact=serializer.validated_data["email"]).first()
        if user is None or not user.is_active:
            raise Unauthorized(INVALID_CREDENTIALS)

        if not user.has_usable_password():
            raise Unauthorized(SOCIAL_ACCOUNT)

        if not user.check_password(serializer.validated_data["password"]):
            raise Unauthorized(INVALID_CREDENTIALS)

        return Response({
            **_token_pair(user),
            "user": UserSerializer(user, context={"request": request}).data,
        })


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        return Response({
            "id": user.id,
            "email": user.email,
            "name": user.display_name,
            "role": user.role,
        })


class ForgotPasswordView(APIView):
    """
    POST /api/auth/forgot-password/    Body: { "email": "..." }
    Same answer whether or not the account exists.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "password-reset"

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(email__iexact=serializer.validated_data["email"]).first()
        if user is not None:
            token = secrets.token_hex(20)
            user.reset_password_token = token
            user.reset_password_expires = clock_now() + timedelta(
                seconds=settings.PASSWORD_RESET_TIMEOUT_SECONDS
            )
            user.save(update_fields=["reset_password_token", "reset_password_expires"])

            reset_url = build_frontend_url(f"reset-password.html?token={token}")
            notify_password_reset(user.email, reset_url)
            logger.info(f"Password reset requested: user={user.id}")

        return Response({"message": RESET_SENT})


class ResetPasswordView(APIView):
    """
    POST /api/auth/reset-password/    Body: { "token": "...", "password": "..." }
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(
            reset_password_token=serializer.validated_data["token"],
            reset_password_expires__gt=clock_now(),
        ).first()
        if user is None:
            raise InvalidState(RESET_INVALID)

        user.set_password(serializer.validated_data["password"])
        user.reset_password_token = None
        user.reset_password_expires = None
        user.save()
        logger.info(f"Password reset completed: user={user.id}")

        return Response({"message": "Password has been reset successfully."})
