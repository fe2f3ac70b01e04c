from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from festival.models import (
    Attendance,
    Configuration,
    GroupMember,
    House,
    Program,
    Registration,
    User,
)


class GroupMemberInline(admin.TabularInline):
    model = GroupMember
    extra = 0
    raw_id_fields = ["user"]


class AttendanceInline(admin.TabularInline):
    model = Attendance
    extra = 0
    fk_name = "registration"
    raw_id_fields = ["user", "marked_by"]


@admin.register(User)
class FestivalUserAdmin(UserAdmin):
    list_display = ["username", "email", "role", "house", "is_staff"]
    list_filter = ["role", "house", "is_staff"]
    fieldsets = UserAdmin.fieldsets + (("Festival", {"fields": ("role", "house")}),)


@admin.register(House)
class HouseAdmin(admin.ModelAdmin):
    list_display = ["name", "color", "created_at"]
    search_fields = ["name"]


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ["name", "type", "category", "min_members", "max_members", "is_active"]
    list_filter = ["type", "category", "is_active"]
    search_fields = ["name"]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["program", "user", "house", "is_group", "status", "grade"]
    list_filter = ["status", "grade", "house", "program__category"]
    search_fields = ["user__username", "program__name", "group_name"]
    raw_id_fields = ["user"]
    inlines = [GroupMemberInline, AttendanceInline]


@admin.register(Configuration)
class ConfigurationAdmin(admin.ModelAdmin):
    list_display = ["key", "value", "description", "updated_at"]
    search_fields = ["key"]
