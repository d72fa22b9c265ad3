from django.contrib import admin
from .models import EmailTemplate, Campaign, EmailEvent, MessageLog


@admin.register(EmailTemplate)
class EmailTemplateAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "subject_template", "html_template_path")


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "template", "enabled", "schedule_cron", "last_run_at")
    list_filter = ("enabled",)


@admin.register(EmailEvent)
class EmailEventAdmin(admin.ModelAdmin):
    list_display = ("id", "campaign", "form_level", "event", "email", "timestamp")
    list_filter = ("event", "form_level")
    search_fields = ("email", "provider_id")


@admin.register(MessageLog)
class MessageLogAdmin(admin.ModelAdmin):
    list_display = ("id", "campaign", "form_level", "report_date", "recipient", "sent_at", "provider_id")
    list_filter = ("form_level", "report_date")
    search_fields = ("recipient", "campaign__name", "provider_id")
