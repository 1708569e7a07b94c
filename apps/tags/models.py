from django.core.validators import RegexValidator
from django.db import models
from django.db.models.functions import Lower
import uuid


HEX_COLOR_VALIDATOR = RegexValidator(
    regex=r'^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$',
    message='Color must be a #RRGGBB or #AARRGGBB hex string.',
)

DEFAULT_TAG_COLOR = '#E0E0E0'


class TagType(models.TextChoices):
    LOYALTY = 'loyalty', 'Loyalty'
    BEHAVIOR = 'behavior', 'Behavior'
    EVENT = 'event', 'Event'
    RETENTION = 'retention', 'Retention'
    HEALTH = 'health', 'Health'
    CUSTOM = 'custom', 'Custom'


TAG_TYPE_ICONS = {
    TagType.LOYALTY: 'star.fill',
    TagType.BEHAVIOR: 'face.smiling',
    TagType.EVENT: 'calendar',
    TagType.RETENTION: 'flag',
    TagType.HEALTH: 'cross.case',
    TagType.CUSTOM: 'tag',
}

TAG_TYPE_COLORS = {
    TagType.LOYALTY: '#FFD700',
    TagType.BEHAVIOR: '#7AC943',
    TagType.EVENT: '#00B0F0',
    TagType.RETENTION: '#ED7D31',
    TagType.HEALTH: '#A020F0',
    TagType.CUSTOM: '#AAAAAA',
}


class Tag(models.Model):
    """Business tag that can be attached to owners (VIP, Senior, Birthday...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    label = models.CharField(max_length=50)
    tag_type = models.CharField(max_length=20, choices=TagType.choices, default=TagType.CUSTOM)
    color = models.CharField(max_length=9, default=DEFAULT_TAG_COLOR, validators=[HEX_COLOR_VALIDATOR])
    icon_name = models.CharField(max_length=50, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tags'
        constraints = [
            models.UniqueConstraint(Lower('label'), name='unique_tag_label_ci'),
        ]
        indexes = [
            models.Index(fields=['tag_type'], name='tags_type_idx'),
        ]
        ordering = ['label']

    def __str__(self):
        return f"{self.label} ({self.get_tag_type_display()})"

    @property
    def display_icon(self) -> str:
        """Explicit icon, or the default icon of the tag type."""
        return self.icon_name or TAG_TYPE_ICONS.get(self.tag_type, 'tag')

    def to_audit_payload(self) -> dict:
        return {
            'tag_id': str(self.id),
            'label': self.label,
            'type': self.tag_type,
        }
