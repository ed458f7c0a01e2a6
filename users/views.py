import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model

from core.exceptions import NotFound, PermissionDenied, ValidationError
from core.uploads import FOLDER_PROFILES, KIND_IMAGE, save_upload
from .serializers import RoleSerializer, UpdateProfileSerializer, UserSerializer

logger = logging.getLogger("cos.users")

User = get_user_model()


class ProfileView(APIView):
    """
    GET   /api/users/profile/
    PATCH /api/users/profile/    Body: { "name": "...", "email": "..." }
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user, context={"request": request}).data)

    def patch(self, request):
        serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user, context={"request": request}).data)


class ProfileImageView(APIView):
    """
    POST /api/users/profile/image/    multipart: "profileImage"
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        upload = request.FILES.get("profileImage") or request.FILES.get("file")
        if upload is None:
            raise ValidationError("No image file was uploaded.")

        name = save_upload(upload, FOLDER_PROFILES, KIND_IMAGE, field_name="profileImage")
        request.user.profile_image_url = name
        request.user.save(update_fields=["profile_image_url"])

        return Response(UserSerializer(request.user, context={"request": request}).data)


class AdminUserListView(APIView):
    """
    GET /api/users/    (admin)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.is_admin:
            raise PermissionDenied("Forbidden")

        users = User.objects.order_by("-date_joined", "-id")
        role = request.query_params.get("role")
        if role:
            users = users.filter(role=role)

        return Response(UserSerializer(users, many=True, context={"request": request}).data)


class UserRoleView(APIView):
    """
    PATCH /api/users/<user_id>/role/    Body: { "role": "student" | "club" | "admin" }
    """
    permission_classes = [IsAuthenticated]

    def patch(self, request, user_id):
        if not request.user.is_admin:
            raise PermissionDenied("Forbidden")

        if request.user.id == user_id:
            raise PermissionDenied("Admins cannot change their own role.")

        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        target = User.objects.filter(pk=user_id).first()
        if target is None:
            raise NotFound("User not found.")

        old_role = target.role
        target.role = serializer.validated_data["role"]
        target.save(update_fields=["role"])
        logger.info(f"Role changed: user={target.id}, {old_role} -> {target.role}, by={request.user.id}")

        return Response(UserSerializer(target, context={"request": request}).data)
