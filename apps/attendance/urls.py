from django.urls import path
from . import views

app_name = 'attendance'

urlpatterns = [
    # Registration
    path('register/', views.register, name='register'),
    path('register/team/', views.register_team, name='register-team'),

    # Pendings
    path('pending/all/', views.pending_all, name='pending-all'),
    path('pending/member/', views.pending_member, name='pending-member'),
    path('pending/team/<uuid:team_id>/', views.pending_leader, name='pending-leader'),

    # Teams
    path('team/<uuid:team_id>/members/', views.team_members, name='team-members'),
    path('team/<uuid:team_id>/schedules/', views.team_schedules, name='team-schedules'),
    path('leader/teams/', views.leader_teams, name='leader-teams'),
    path('leader/teams/members/', views.leader_teams_members, name='leader-teams-members'),
    path('leader/stats/team/<uuid:team_id>/', views.team_stats, name='team-stats'),

    # Records
    path('records/', views.records, name='records'),
    path('stats/', views.stats, name='stats'),
    path('sheets/hierarchical/', views.sheets_hierarchical, name='sheets-hierarchical'),
]
