from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User


@admin.register(User)
class TaskCatalystUserAdmin(UserAdmin):
    list_display = ['username', 'email', 'subscription_status', 'productivity_score', 'productivity_streak', 'onboarding_completed']
    list_filter = ['subscription_status', 'onboarding_completed', 'is_active']
    fieldsets = UserAdmin.fieldsets + (
        ('Profile', {'fields': ('interests', 'life_goal', 'daily_free_time', 'age', 'gender', 'onboarding_completed')}),
        ('Gamification', {'fields': ('productivity_score', 'productivity_streak', 'last_activity_date')}),
        ('Billing', {'fields': ('stripe_customer_id', 'stripe_subscription_id', 'subscription_status')}),
    )
