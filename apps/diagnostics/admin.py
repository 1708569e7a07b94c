from django.contrib import admin
from .models import CrashReport


@admin.register(CrashReport)
class CrashReportAdmin(admin.ModelAdmin):
    list_display = ['date', 'report_type', 'message', 'app_version', 'device_model', 'resolved']
    list_filter = ['report_type', 'resolved', 'app_version']
    search_fields = ['message', 'stack_trace']
    date_hierarchy = 'date'

    actions = ['mark_resolved']

    @admin.action(description='Mark selected reports resolved')
    def mark_resolved(self, request, queryset):
        count = queryset.update(resolved=True)
        self.message_user(request, f'Resolved {count} report(s).')
