"""Django signals for cache invalidation.

Scores are recomputed from registrations and attendance, so any change to
those rows (or to the houses themselves) drops the cached leaderboard.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from festival.cache import invalidate_leaderboard
from festival.models import Attendance, GroupMember, House, Registration


@receiver([post_save, post_delete], sender=Registration)
def invalidate_on_registration_change(sender, instance, **kwargs):
    """Invalidate the leaderboard when a registration is saved or deleted."""
    invalidate_leaderboard()


@receiver([post_save, post_delete], sender=GroupMember)
def invalidate_on_member_change(sender, instance, **kwargs):
    invalidate_leaderboard()


@receiver([post_save, post_delete], sender=Attendance)
def invalidate_on_attendance_change(sender, instance, **kwargs):
    """Invalidate the leaderboard when an attendance mark changes."""
    invalidate_leaderboard()


@receiver([post_save, post_delete], sender=House)
def invalidate_on_house_change(sender, instance, **kwargs):
    """Invalidate the leaderboard when a house is added, renamed or removed."""
    invalidate_leaderboard()
