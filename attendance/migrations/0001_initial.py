from django.db import migrations, models


YES_NO = [("yes", "yes"), ("no", "no")]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AttendanceSlip",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("beadle_email", models.EmailField(db_index=True, max_length=254)),
                (
                    "grade_level",
                    models.CharField(
                        choices=[
                            ("1st Form", "1st Form"),
                            ("2nd Form", "2nd Form"),
                            ("3rd Form", "3rd Form"),
                            ("4th Form", "4th Form"),
                            ("5th Form", "5th Form"),
                            ("6A", "6A (Upper 6th)"),
                            ("6B", "6B (Lower 6th)"),
                        ],
                        db_index=True,
                        max_length=16,
                    ),
                ),
                ("class_name", models.CharField(max_length=16)),
                ("class_start_time", models.TimeField()),
                ("class_end_time", models.TimeField()),
                ("date", models.DateField(db_index=True)),
                ("teacher", models.CharField(max_length=128)),
                ("subject", models.CharField(max_length=128)),
                ("teacher_present", models.CharField(choices=YES_NO, max_length=3)),
                ("teacher_arrival_time", models.TimeField(blank=True, null=True)),
                ("substitute_received", models.CharField(blank=True, choices=YES_NO, max_length=3, null=True)),
                ("homework_given", models.CharField(choices=YES_NO, default="no", max_length=3)),
                ("students_present", models.PositiveIntegerField(default=0)),
                ("absent_students", models.JSONField(blank=True, default=list)),
                ("late_students", models.JSONField(blank=True, default=list)),
                ("is_double_session", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-date", "class_start_time", "id"],
            },
        ),
    ]
