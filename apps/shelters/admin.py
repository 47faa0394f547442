from django.contrib import admin
from .models import Shelter, Team, LeaderProfile, MemberProfile


class TeamInline(admin.TabularInline):
    model = Team
    extra = 0
    fields = ['number', 'description']
    ordering = ['number']


@admin.register(Shelter)
class ShelterAdmin(admin.ModelAdmin):
    list_display = ['name', 'city', 'state', 'teams_quantity', 'created_at']
    search_fields = ['name', 'city', 'district']
    list_filter = ['state', 'city']
    inlines = [TeamInline]
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ['shelter', 'number', 'description', 'created_at']
    list_filter = ['shelter']
    search_fields = ['shelter__name', 'description']
    ordering = ['shelter__name', 'number']


@admin.register(LeaderProfile)
class LeaderProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'active', 'created_at']
    list_filter = ['active']
    search_fields = ['user__email', 'user__name']
    filter_horizontal = ['teams']
    raw_id_fields = ['user']


@admin.register(MemberProfile)
class MemberProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'team', 'active', 'created_at']
    list_filter = ['active', 'team__shelter']
    search_fields = ['user__email', 'user__name']
    raw_id_fields = ['user', 'team']
