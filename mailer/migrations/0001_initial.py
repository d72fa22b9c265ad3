import django.db.models.deletion
from django.db import migrations, models


FORM_CHOICES = [
    ("1st Form", "1st Form"),
    ("2nd Form", "2nd Form"),
    ("3rd Form", "3rd Form"),
    ("4th Form", "4th Form"),
    ("5th Form", "5th Form"),
    ("6A", "6A (Upper 6th)"),
    ("6B", "6B (Lower 6th)"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="EmailTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.SlugField(unique=True)),
                ("subject_template", models.CharField(max_length=200)),
                ("html_template_path", models.CharField(max_length=200)),
                ("text_template_path", models.CharField(blank=True, max_length=200, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="Campaign",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=128, unique=True)),
                ("enabled", models.BooleanField(default=False)),
                ("schedule_cron", models.CharField(max_length=64)),
                ("last_run_at", models.DateTimeField(blank=True, null=True)),
                (
                    "template",
                    models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="mailer.emailtemplate"),
                ),
            ],
        ),
        migrations.CreateModel(
            name="MessageLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("form_level", models.CharField(choices=FORM_CHOICES, max_length=16)),
                ("report_date", models.DateField()),
                ("recipient", models.EmailField(max_length=254)),
                ("sent_at", models.DateTimeField(auto_now_add=True)),
                ("provider_id", models.CharField(blank=True, max_length=128, null=True)),
                (
                    "campaign",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="mailer.campaign"),
                ),
            ],
            options={
                "unique_together": {("campaign", "form_level", "report_date")},
            },
        ),
        migrations.CreateModel(
            name="EmailEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("form_level", models.CharField(blank=True, max_length=16)),
                ("event", models.CharField(max_length=32)),
                ("provider_id", models.CharField(blank=True, max_length=128, null=True)),
                ("email", models.EmailField(max_length=254)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("payload", models.JSONField(blank=True, default=dict)),
                (
                    "campaign",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to="mailer.campaign",
                    ),
                ),
            ],
        ),
    ]
