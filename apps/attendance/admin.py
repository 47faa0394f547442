from django.contrib import admin
from .models import Attendance


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['member', 'schedule', 'category', 'type', 'created_at']
    list_filter = ['category', 'type', 'schedule__team__shelter']
    search_fields = ['member__name', 'member__email', 'comment']
    raw_id_fields = ['member', 'schedule']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
