from django.contrib import admin
from .models import Charge


@admin.register(Charge)
class ChargeAdmin(admin.ModelAdmin):
    list_display = ['date', 'owner', 'dog', 'charge_type', 'amount', 'is_paid', 'payment_method']
    list_filter = ['is_paid', 'charge_type', 'payment_method']
    search_fields = ['owner__owner_name', 'dog__name', 'notes']
    date_hierarchy = 'date'
    raw_id_fields = ['owner', 'dog', 'appointment', 'processed_by']
