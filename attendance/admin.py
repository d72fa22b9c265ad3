from django.contrib import admin
from .models import AttendanceSlip


@admin.register(AttendanceSlip)
class AttendanceSlipAdmin(admin.ModelAdmin):
    list_display = ("date", "grade_level", "class_name", "subject", "teacher", "teacher_present", "beadle_email")
    list_filter = ("grade_level", "teacher_present", "date")
    search_fields = ("beadle_email", "class_name", "subject", "teacher")

    # Slips are a record of what was reported; they are never edited.
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
