from django.contrib import admin
from .models import DogOwner, Dog


class DogInline(admin.TabularInline):
    model = Dog
    extra = 0
    fields = ['name', 'breed', 'birthdate', 'gender', 'is_active']


@admin.register(DogOwner)
class DogOwnerAdmin(admin.ModelAdmin):
    list_display = ['owner_name', 'phone', 'email', 'is_active', 'date_added']
    list_filter = ['is_active', 'preferred_contact']
    search_fields = ['owner_name', 'email', 'phone']
    readonly_fields = ['date_added', 'last_modified', 'audit_log']
    filter_horizontal = ['tags']
    inlines = [DogInline]


@admin.register(Dog)
class DogAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'breed', 'birthdate', 'is_active']
    list_filter = ['is_active', 'gender']
    search_fields = ['name', 'breed', 'owner__owner_name']
    raw_id_fields = ['owner']
