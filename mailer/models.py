from django.db import models

from accounts.models import FormLevel


class EmailTemplate(models.Model):
    key = models.SlugField(unique=True)
    subject_template = models.CharField(max_length=200)
    html_template_path = models.CharField(max_length=200)
    text_template_path = models.CharField(max_length=200, blank=True, null=True)

    def __str__(self):
        return self.key


class Campaign(models.Model):
    name = models.CharField(max_length=128, unique=True)
    template = models.ForeignKey(EmailTemplate, on_delete=models.PROTECT)
    enabled = models.BooleanField(default=False)
    schedule_cron = models.CharField(max_length=64)
    last_run_at = models.DateTimeField(blank=True, null=True)

    def __str__(self):
        return self.name


class MessageLog(models.Model):
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE)
    form_level = models.CharField(max_length=16, choices=FormLevel.choices)
    report_date = models.DateField()
    recipient = models.EmailField()
    sent_at = models.DateTimeField(auto_now_add=True)
    provider_id = models.CharField(max_length=128, blank=True, null=True)

    class Meta:
        unique_together = [("campaign", "form_level", "report_date")]


class EmailEvent(models.Model):
    campaign = models.ForeignKey(Campaign, on_delete=models.SET_NULL, null=True, blank=True)
    form_level = models.CharField(max_length=16, blank=True)
    event = models.CharField(max_length=32)
    provider_id = models.CharField(max_length=128, blank=True, null=True)
    email = models.EmailField()
    timestamp = models.DateTimeField(auto_now_add=True)
    payload = models.JSONField(default=dict, blank=True)
