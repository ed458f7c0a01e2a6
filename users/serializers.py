from rest_framework import serializers

from core.uploads import storage_url
from .models import User


class UserSerializer(serializers.ModelSerializer):
    profile_image = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'email',
            'role',
            'profile_image_url',
            'profile_image',
            'date_joined',
        ]
        read_only_fields = fields

    def get_profile_image(self, obj):
        return storage_url(obj.profile_image_url, self.context.get('request'))


class UpdateProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(required=False)

    class Meta:
        model = User
        fields = ['name', 'email']

    def validate_email(self, value):
        value = value.strip().lower()
        taken = User.objects.filter(email__iexact=value).exclude(pk=self.instance.pk)
        if taken.exists():
            raise serializers.ValidationError("This email is already in use.")
        return value

    def update(self, instance, validated_data):
        # accounts sign up with username == email; keep the pair together
        if 'email' in validated_data:
            validated_data['username'] = validated_data['email']
        return super().update(instance, validated_data)


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
