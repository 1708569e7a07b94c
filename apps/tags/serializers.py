from rest_framework import serializers
from .models import Tag, TagType, HEX_COLOR_VALIDATOR


class TagSerializer(serializers.ModelSerializer):
    display_icon = serializers.CharField(read_only=True)

    class Meta:
        model = Tag
        fields = ['id', 'label', 'tag_type', 'color', 'icon_name', 'display_icon', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Case-insensitive uniqueness is checked by the service layer
        validators = []


class TagFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default='')
    tag_type = serializers.ChoiceField(choices=TagType.choices, required=False, allow_blank=True, default='')


class ApplyTagInputSerializer(serializers.Serializer):
    owner = serializers.UUIDField()


class TagUpdateSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=50, required=False)
    tag_type = serializers.ChoiceField(choices=TagType.choices, required=False)
    color = serializers.CharField(max_length=9, required=False, validators=[HEX_COLOR_VALIDATOR])
    icon_name = serializers.CharField(max_length=50, required=False, allow_blank=True)
