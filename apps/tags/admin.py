from django.contrib import admin
from .models import Tag


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ['label', 'tag_type', 'color', 'icon_name', 'created_at']
    list_filter = ['tag_type']
    search_fields = ['label']
    ordering = ['label']
