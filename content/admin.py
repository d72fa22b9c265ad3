from django.contrib import admin
from .models import Announcement


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("title", "priority", "created_at", "created_by")
    list_filter = ("priority",)
    search_fields = ("title", "content")
    autocomplete_fields = ("created_by",)
