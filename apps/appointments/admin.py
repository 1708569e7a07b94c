from django.contrib import admin
from .models import Appointment, GroomingSession


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['date', 'dog', 'owner', 'service_type', 'status', 'duration_minutes']
    list_filter = ['status', 'service_type']
    search_fields = ['dog__name', 'owner__owner_name']
    date_hierarchy = 'date'
    raw_id_fields = ['owner', 'dog', 'created_by', 'last_modified_by']
    readonly_fields = ['audit_log', 'created_at', 'updated_at']


@admin.register(GroomingSession)
class GroomingSessionAdmin(admin.ModelAdmin):
    list_display = ['date', 'dog', 'service_type', 'rating', 'is_favorite', 'session_revenue', 'tip']
    list_filter = ['service_type', 'is_favorite', 'rating']
    search_fields = ['dog__name', 'notes']
    raw_id_fields = ['dog', 'appointment', 'staff']
    readonly_fields = ['audit_log', 'created_at', 'updated_at']
