from django.db import migrations

TEMPLATES = [
    {
        "key": "supervisor_report",
        "subject_template": "Daily Beadle Report - {form_level} - {date}",
        "html_template_path": "emails/supervisor_report.html",
        "text_template_path": "emails/supervisor_report.txt",
    },
    {
        "key": "slip_confirmation",
        "subject_template": "Beadle Slip Confirmation - {subject} ({date})",
        "html_template_path": "emails/slip_confirmation.html",
        "text_template_path": "emails/slip_confirmation.txt",
    },
]

DAILY_CAMPAIGN = "Daily Supervisor Reports"


def forwards(apps, schema_editor):
    EmailTemplate = apps.get_model("mailer", "EmailTemplate")
    Campaign = apps.get_model("mailer", "Campaign")
    for row in TEMPLATES:
        EmailTemplate.objects.update_or_create(
            key=row["key"],
            defaults={k: v for k, v in row.items() if k != "key"},
        )
    Campaign.objects.get_or_create(
        name=DAILY_CAMPAIGN,
        defaults={
            "template": EmailTemplate.objects.get(key="supervisor_report"),
            "enabled": True,
            # 4 PM school time, weekdays
            "schedule_cron": "0 16 * * 1-5",
        },
    )


def backwards(apps, schema_editor):
    EmailTemplate = apps.get_model("mailer", "EmailTemplate")
    Campaign = apps.get_model("mailer", "Campaign")
    Campaign.objects.filter(name=DAILY_CAMPAIGN).delete()
    EmailTemplate.objects.filter(key__in=[row["key"] for row in TEMPLATES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("mailer", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(forwards, backwards),
    ]
