from datetime import datetime, timedelta

from django import forms

from accounts.models import FormLevel
from .models import AttendanceSlip

SESSION_MINUTES = 35
NUMBERED_FORMS = {FormLevel.FIRST, FormLevel.SECOND, FormLevel.THIRD, FormLevel.FOURTH, FormLevel.FIFTH}


def _name_list(value):
    return [line.strip() for line in (value or "").splitlines() if line.strip()]


class SlipForm(forms.ModelForm):
    absent_students = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 4}),
        help_text="One name per line",
    )
    late_students = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 3}),
        help_text="One name per line",
    )
    class_end_time = forms.TimeField(required=False, widget=forms.TimeInput(attrs={"type": "time"}))

    class Meta:
        model = AttendanceSlip
        fields = [
            "grade_level",
            "class_name",
            "date",
            "class_start_time",
            "class_end_time",
            "is_double_session",
            "teacher",
            "subject",
            "teacher_present",
            "teacher_arrival_time",
            "substitute_received",
            "homework_given",
            "students_present",
            "absent_students",
            "late_students",
        ]
        widgets = {
            "date": forms.DateInput(attrs={"type": "date"}),
            "class_start_time": forms.TimeInput(attrs={"type": "time"}),
            "teacher_arrival_time": forms.TimeInput(attrs={"type": "time"}),
            "teacher_present": forms.RadioSelect,
            "homework_given": forms.RadioSelect,
        }

    def clean_class_name(self):
        return self.cleaned_data["class_name"].strip().upper()

    def clean_absent_students(self):
        return _name_list(self.cleaned_data.get("absent_students"))

    def clean_late_students(self):
        return _name_list(self.cleaned_data.get("late_students"))

    def clean(self):
        cleaned = super().clean()
        level = FormLevel.parse(cleaned.get("grade_level"))
        class_name = cleaned.get("class_name")
        if level in NUMBERED_FORMS and class_name and not class_name.startswith(level.number):
            self.add_error("class_name", f"Class name must start with the form number ({level.number}).")

        start = cleaned.get("class_start_time")
        end = cleaned.get("class_end_time")
        if start and not end:
            minutes = SESSION_MINUTES * (2 if cleaned.get("is_double_session") else 1)
            end = (datetime.combine(datetime.min, start) + timedelta(minutes=minutes)).time()
            cleaned["class_end_time"] = end
        if start and end and end <= start:
            self.add_error("class_end_time", "End time must be after the start time.")

        if cleaned.get("teacher_present") == "yes":
            cleaned["substitute_received"] = None
        else:
            cleaned["teacher_arrival_time"] = None
        return cleaned
