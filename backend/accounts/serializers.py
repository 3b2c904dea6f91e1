from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'name', 'email', 'role')
        read_only_fields = fields


class MeSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(source='display_name', read_only=True)
    role = serializers.CharField(read_only=True)
    home_section = serializers.IntegerField(source='home_section_id', read_only=True, allow_null=True)
    sections_coordinated = serializers.SerializerMethodField()
    departments_headed = serializers.SerializerMethodField()

    def get_sections_coordinated(self, obj):
        return list(obj.coordinated_sections.values_list('id', flat=True))

    def get_departments_headed(self, obj):
        return list(obj.headed_departments.values_list('id', flat=True))
