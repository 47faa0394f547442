from django.contrib import admin
from .models import VisitReport


@admin.register(VisitReport)
class VisitReportAdmin(admin.ModelAdmin):
    list_display = [
        'schedule',
        'team_members_present',
        'sheltered_heard_message',
        'sheltered_decisions',
        'created_at',
    ]
    list_filter = ['schedule__team__shelter']
    search_fields = ['schedule__team__shelter__name', 'observation']
    raw_id_fields = ['schedule']
    readonly_fields = ['created_at', 'updated_at']
