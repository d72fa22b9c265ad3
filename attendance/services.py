from django.db.models import Q

from .models import AttendanceSlip


def filter_slips(queryset, query=None, on_date=None, grade_level=None):
    if query:
        queryset = queryset.filter(
            Q(subject__icontains=query) | Q(teacher__icontains=query) | Q(class_name__icontains=query)
        )
    if on_date:
        queryset = queryset.filter(date=on_date)
    if grade_level:
        queryset = queryset.filter(grade_level=grade_level)
    return queryset


def slips_for_member(member, query=None, on_date=None):
    qs = AttendanceSlip.objects.filter(beadle_email__iexact=member.email)
    return filter_slips(qs, query=query, on_date=on_date).order_by("-date", "-class_start_time", "-id")


def slip_totals(slips) -> dict:
    totals = {"slips": 0, "teacher_present": 0, "teacher_absent": 0, "present": 0, "absent": 0, "late": 0}
    for slip in slips:
        totals["slips"] += 1
        if slip.teacher_present == "yes":
            totals["teacher_present"] += 1
        else:
            totals["teacher_absent"] += 1
        totals["present"] += slip.students_present
        totals["absent"] += len(slip.absent_students or [])
        totals["late"] += len(slip.late_students or [])
    return totals


def serialize_slip(slip) -> dict:
    return {
        "id": slip.id,
        "beadle_email": slip.beadle_email,
        "grade_level": slip.grade_level,
        "class_name": slip.class_name,
        "class_start_time": slip.class_start_time.strftime("%H:%M"),
        "class_end_time": slip.class_end_time.strftime("%H:%M"),
        "date": slip.date.isoformat(),
        "teacher": slip.teacher,
        "subject": slip.subject,
        "teacher_present": slip.teacher_present,
        "teacher_arrival_time": (
            slip.teacher_arrival_time.strftime("%H:%M") if slip.teacher_arrival_time else None
        ),
        "substitute_received": slip.substitute_received,
        "homework_given": slip.homework_given,
        "students_present": slip.students_present,
        "absent_students": list(slip.absent_students or []),
        "late_students": list(slip.late_students or []),
        "is_double_session": slip.is_double_session,
        "created_at": slip.created_at.isoformat() if slip.created_at else None,
    }


def slip_store_summary() -> dict:
    slips = AttendanceSlip.objects.all()
    latest = slips.order_by("-created_at", "-id").first()
    return {
        "totalSlips": slips.count(),
        "formLevels": list(slips.order_by("grade_level").values_list("grade_level", flat=True).distinct()),
        "dates": [d.isoformat() for d in slips.order_by("-date").values_list("date", flat=True).distinct()],
        "sampleSlip": serialize_slip(latest) if latest else None,
    }
