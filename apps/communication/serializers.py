from rest_framework import serializers

from .models import Contact


class ContactSerializer(serializers.ModelSerializer):
    class Meta:
        model = Contact
        fields = ['id', 'name', 'email', 'phone', 'message', 'is_read', 'created_at', 'updated_at']
        read_only_fields = fields


class ContactCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=255)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    message = serializers.CharField(max_length=5000)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value


class ContactFilterSerializer(serializers.Serializer):
    unread = serializers.BooleanField(required=False, default=False)
