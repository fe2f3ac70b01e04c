from rest_framework.permissions import BasePermission

from festival.models import User

GRADING_ROLES = {User.Role.COORDINATOR, User.Role.ADMIN, User.Role.MASTER}


class IsStudent(BasePermission):
    """Only students register for programs."""

    message = "Only students can register for programs."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role == User.Role.STUDENT)


class CanGradeResults(BasePermission):
    """Coordinators, admins and staff accounts record results."""

    message = "You are not allowed to record results."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.is_staff or user.role in GRADING_ROLES
