from festival.handlers.views import (
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

__all__ = [
    "GradeView",
    "HouseMembersView",
    "LeaderboardView",
    "ProgramListView",
    "QuotaView",
    "RecentResultsView",
    "RegistrationBatchView",
    "RegistrationDetailView",
    "RegistrationListView",
]
