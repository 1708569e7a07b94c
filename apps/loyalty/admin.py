from django.contrib import admin
from .models import LoyaltyProgram, LoyaltyReward, RewardPool


class LoyaltyRewardInline(admin.TabularInline):
    model = LoyaltyReward
    extra = 0
    fields = ['reward_type', 'date', 'expiry_date', 'notes']


@admin.register(LoyaltyProgram)
class LoyaltyProgramAdmin(admin.ModelAdmin):
    list_display = ['owner', 'points', 'tier', 'visit_count', 'last_reward_date']
    search_fields = ['owner__owner_name']
    raw_id_fields = ['owner']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [LoyaltyRewardInline]

    def tier(self, obj):
        return obj.tier


@admin.register(RewardPool)
class RewardPoolAdmin(admin.ModelAdmin):
    list_display = ['name', 'total_points', 'created_at']
    search_fields = ['name']
    filter_horizontal = ['participants']
