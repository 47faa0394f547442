from django.contrib import admin
from .models import ShelterSchedule, Event


class EventInline(admin.TabularInline):
    model = Event
    extra = 0
    fields = ['event_type', 'title', 'date', 'location', 'audience']
    readonly_fields = ['event_type']


@admin.register(ShelterSchedule)
class ShelterScheduleAdmin(admin.ModelAdmin):
    list_display = ['team', 'visit_number', 'visit_date', 'meeting_date', 'meeting_room']
    list_filter = ['team__shelter', 'visit_date']
    search_fields = ['team__shelter__name', 'lesson_content']
    ordering = ['-visit_date']
    date_hierarchy = 'visit_date'
    inlines = [EventInline]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'date', 'event_type', 'audience', 'location']
    list_filter = ['event_type', 'audience', 'date']
    search_fields = ['title', 'description', 'location']
    ordering = ['-date']
