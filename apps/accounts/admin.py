from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User


BADGE_STYLE = (
    '<span style="background: {}; color: white; padding: 3px 8px; '
    'border-radius: 10px; font-size: 11px;">{}</span>'
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for Furfolio staff accounts.

    Shows role, account state and risk score, with bulk actions for
    suspending and re-enabling accounts.
    """

    list_display = [
        'email',
        'display_name',
        'role',
        'state_badge',
        'risk_score_display',
        'login_streak',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_active',
        'is_suspended',
        'is_archived',
        'verified',
        'mfa_enabled',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'phone', 'role', 'password')
        }),
        ('Account State', {
            'fields': ('is_active', 'is_suspended', 'is_archived', 'is_staff', 'is_superuser'),
        }),
        ('Security', {
            'fields': ('verified', 'mfa_enabled', 'password_last_changed', 'compliance_accepted_at'),
            'classes': ('collapse',),
        }),
        ('Engagement', {
            'fields': ('login_streak', 'badge_tokens'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
        'password_last_changed',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def state_badge(self, obj):
        """Display account state as colored badge."""
        if obj.is_suspended:
            return format_html(BADGE_STYLE, '#B85C5C', 'Suspended')
        if obj.is_archived:
            return format_html(BADGE_STYLE, '#999999', 'Archived')
        if not obj.is_active:
            return format_html(BADGE_STYLE, '#B85C5C', 'Inactive')
        return format_html(BADGE_STYLE, '#6B8E5E', 'Active')
    state_badge.short_description = 'State'

    def risk_score_display(self, obj):
        return obj.risk_score
    risk_score_display.short_description = 'Risk'

    actions = ['suspend_users', 'enable_users']

    @admin.action(description='Suspend selected users')
    def suspend_users(self, request, queryset):
        """Suspend selected users (excludes superusers)."""
        count = queryset.filter(is_superuser=False).update(is_suspended=True)
        self.message_user(request, f'Suspended {count} user(s).')

    @admin.action(description='Enable selected users')
    def enable_users(self, request, queryset):
        count = queryset.update(is_active=True, is_suspended=False, is_archived=False)
        self.message_user(request, f'Enabled {count} user(s).')
