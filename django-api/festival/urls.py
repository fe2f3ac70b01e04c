from django.urls import path

from festival.handlers import (
    GradeView,
    HouseMembersView,
    LeaderboardView,
    ProgramListView,
    QuotaView,
    RecentResultsView,
    RegistrationBatchView,
    RegistrationDetailView,
    RegistrationListView,
)

urlpatterns = [
    path("programs", ProgramListView.as_view(), name="program-list"),
    path("registrations", RegistrationListView.as_view(), name="registration-list"),
    path(
        "registrations/batch",
        RegistrationBatchView.as_view(),
        name="registration-batch",
    ),
    path("registrations/quota", QuotaView.as_view(), name="registration-quota"),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path(
        "registrations/<str:registration_id>/grade",
        GradeView.as_view(),
        name="registration-grade",
    ),
    path("houses/members", HouseMembersView.as_view(), name="house-members"),
    path("leaderboard", LeaderboardView.as_view(), name="leaderboard"),
    path("results/recent", RecentResultsView.as_view(), name="recent-results"),
]
