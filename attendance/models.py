from django.db import models

from accounts.models import FormLevel


class AttendanceSlip(models.Model):
    YES_NO_CHOICES = [
        ("yes", "yes"),
        ("no", "no"),
    ]
    beadle_email = models.EmailField(db_index=True)
    grade_level = models.CharField(max_length=16, choices=FormLevel.choices, db_index=True)
    class_name = models.CharField(max_length=16)
    class_start_time = models.TimeField()
    class_end_time = models.TimeField()
    date = models.DateField(db_index=True)
    teacher = models.CharField(max_length=128)
    subject = models.CharField(max_length=128)
    teacher_present = models.CharField(max_length=3, choices=YES_NO_CHOICES)
    teacher_arrival_time = models.TimeField(null=True, blank=True)
    substitute_received = models.CharField(max_length=3, choices=YES_NO_CHOICES, blank=True, null=True)
    homework_given = models.CharField(max_length=3, choices=YES_NO_CHOICES, default="no")
    students_present = models.PositiveIntegerField(default=0)
    absent_students = models.JSONField(default=list, blank=True)
    late_students = models.JSONField(default=list, blank=True)
    is_double_session = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "class_start_time", "id"]

    def __str__(self):
        return f"{self.date} {self.class_name} {self.subject}"

    @property
    def time_range(self):
        return f"{self.class_start_time:%H:%M} - {self.class_end_time:%H:%M}"

    @property
    def teacher_status(self):
        if self.teacher_present == "yes":
            return "present"
        if self.substitute_received == "yes":
            return "substitute"
        return "absent"
