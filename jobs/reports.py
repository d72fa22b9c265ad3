from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounts.models import FormLevel

logger = logging.getLogger(__name__)

NO_SUBMISSIONS = "NO SUBMISSIONS"
REPORT_HTML_TEMPLATE = "emails/supervisor_report.html"
REQUIRED_FIELDS = ("grade_level", "date", "class_name", "subject", "teacher")
RULE = "=" * 48
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ReportDateError(ValueError):
    pass


@dataclass
class FormSummary:
    form_level: FormLevel
    report_date: date
    report_count: int = 0
    teacher_present_count: int = 0
    teacher_absent_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    present_count: int = 0
    classes: List[Dict[str, Any]] = field(default_factory=list)
    absences: List[Dict[str, Any]] = field(default_factory=list)
    late_arrivals: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.absent_count or self.late_count)


def parse_report_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ReportDateError("Date is required (YYYY-MM-DD)")
    value = value.strip()
    parsed = None
    if DATE_RE.match(value):
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
    if parsed is None:
        raise ReportDateError(f"Invalid date '{value}', expected YYYY-MM-DD")
    return parsed


def format_report_date(value: date) -> str:
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def _field(slip, name, default=None):
    if isinstance(slip, dict):
        return slip.get(name, default)
    return getattr(slip, name, default)


def _slip_date(value) -> Optional[date]:
    try:
        return parse_report_date(value)
    except ReportDateError:
        return None


def _clock(value) -> str:
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value or "")[:5]


def _names(value) -> List[str]:
    return [str(n).strip() for n in (value or []) if str(n).strip()]


def _count(value) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def _slip_row(slip) -> Optional[Dict[str, Any]]:
    """Normalized slip, or None when a required field is missing."""
    missing = [name for name in REQUIRED_FIELDS if not _field(slip, name)]
    if missing:
        logger.warning(
            "Skipping slip %s: missing %s", _field(slip, "id"), ", ".join(missing)
        )
        return None
    level = FormLevel.parse(_field(slip, "grade_level"))
    slip_date = _slip_date(_field(slip, "date"))
    if level is None or slip_date is None:
        logger.warning(
            "Skipping slip %s: grade level %r / date %r not recognised",
            _field(slip, "id"),
            _field(slip, "grade_level"),
            _field(slip, "date"),
        )
        return None
    start = _clock(_field(slip, "class_start_time"))
    end = _clock(_field(slip, "class_end_time"))
    return {
        "id": _field(slip, "id") or 0,
        "form_level": level,
        "date": slip_date,
        "class_name": str(_field(slip, "class_name")),
        "subject": str(_field(slip, "subject")),
        "teacher": str(_field(slip, "teacher")),
        "start": start,
        "time_range": f"{start} - {end}",
        "teacher_present": _field(slip, "teacher_present") == "yes",
        "substitute": _field(slip, "substitute_received") == "yes",
        "absent": _names(_field(slip, "absent_students")),
        "late": _names(_field(slip, "late_students")),
        "present": _count(_field(slip, "students_present")),
    }


def _by_student(rows: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    students: Dict[str, List[Dict[str, str]]] = {}
    for row in rows:
        for name in row[key]:
            students.setdefault(name, []).append(
                {"subject": row["subject"], "class_name": row["class_name"], "teacher": row["teacher"]}
            )
    return [{"name": name, "classes": students[name]} for name in sorted(students)]


def _summarize(level: FormLevel, report_date: date, rows: List[Dict[str, Any]]) -> FormSummary:
    rows = sorted(rows, key=lambda r: (r["start"], r["class_name"], str(r["id"])))
    summary = FormSummary(form_level=level, report_date=report_date)
    for row in rows:
        summary.report_count += 1
        if row["teacher_present"]:
            summary.teacher_present_count += 1
        else:
            summary.teacher_absent_count += 1
        summary.absent_count += len(row["absent"])
        summary.late_count += len(row["late"])
        summary.present_count += row["present"]
        if row["teacher_present"]:
            status = "present"
        elif row["substitute"]:
            status = "substitute"
        else:
            status = "absent"
        summary.classes.append({**row, "teacher_status": status})
    summary.absences = _by_student(rows, "absent")
    summary.late_arrivals = _by_student(rows, "late")
    return summary


def aggregate_slips(report_date, slips: Iterable) -> Dict[str, Optional[FormSummary]]:
    """
    Group one day's slips by form. Every form gets an entry, in form order;
    forms without submissions map to None.
    """
    target = parse_report_date(report_date)
    groups: Dict[FormLevel, List[Dict[str, Any]]] = {level: [] for level in FormLevel}
    for slip in slips:
        row = _slip_row(slip)
        if row is None or row["date"] != target:
            continue
        groups[row["form_level"]].append(row)
    return {
        level.value: (_summarize(level, target, rows) if rows else None)
        for level, rows in groups.items()
    }


def _student_lines(entries: List[Dict[str, Any]]) -> List[str]:
    lines = []
    for entry in entries:
        lines.append(f"  {entry['name']} ({len(entry['classes'])})")
        for cls in entry["classes"]:
            lines.append(f"    - {cls['subject']} - {cls['class_name']} with {cls['teacher']}")
    return lines


def render_form_report(form_label: str, report_date: date, summary: Optional[FormSummary]) -> str:
    lines = [
        f"Daily Supervisor Report - {form_label}",
        f"Date: {format_report_date(report_date)}",
        RULE,
    ]
    if summary is None:
        lines.append(NO_SUBMISSIONS)
        lines.append(f"No beadle slips were submitted for {form_label} on this date.")
        return "\n".join(lines) + "\n"
    lines += [
        f"Reports submitted: {summary.report_count}",
        f"Teacher present: {summary.teacher_present_count}",
        f"Teacher absent: {summary.teacher_absent_count}",
        f"Students present: {summary.present_count}",
        f"Students absent: {summary.absent_count}",
        f"Students late: {summary.late_count}",
        "",
    ]
    if not summary.has_issues:
        lines += ["No absences or late arrivals were reported.", ""]
    if summary.absences:
        lines.append(f"Absences ({summary.absent_count}):")
        lines += _student_lines(summary.absences)
        lines.append("")
    if summary.late_arrivals:
        lines.append(f"Late arrivals ({summary.late_count}):")
        lines += _student_lines(summary.late_arrivals)
        lines.append("")
    lines.append("Classes:")
    for cls in summary.classes:
        lines.append(
            f"  {cls['time_range']} | {cls['class_name']} | {cls['subject']} | "
            f"{cls['teacher']} | teacher {cls['teacher_status']} | "
            f"present {cls['present']}, absent {len(cls['absent'])}, late {len(cls['late'])}"
        )
    return "\n".join(lines) + "\n"


def generate_all_supervisor_reports(report_date, slips: Iterable) -> Dict[str, str]:
    """Plain-text report per form for one date, keyed by form label."""
    target = parse_report_date(report_date)
    grouped = aggregate_slips(target, slips)
    return {label: render_form_report(label, target, summary) for label, summary in grouped.items()}


def generate_today_reports(slips: Iterable) -> Dict[str, str]:
    return generate_all_supervisor_reports(timezone.localdate(), slips)


def fallback_supervisor(form_label: str) -> Dict[str, str]:
    local = "".join(form_label.lower().split())
    return {
        "email": f"{local}supervisor@{settings.SCHOOL_EMAIL_DOMAIN}",
        "name": f"{form_label} Supervisor",
    }


def get_supervisor(level: FormLevel) -> Dict[str, str]:
    from accounts.permissions import ROLE_FOR_FORM
    from accounts.roles import get_members_by_role

    member = get_members_by_role(ROLE_FOR_FORM[level]).first()
    if member is not None and member.email:
        return {"email": member.email, "name": member.get_full_name()}
    logger.warning("No supervisor found for %s, using fallback address", level.value)
    return fallback_supervisor(level.value)


def build_supervisor_reports(report_date=None, forms=None) -> Dict[str, Dict[str, Any]]:
    """
    Everything needed to mail each form's supervisor: recipient, text and
    HTML renderings. Defaults to today in the school's timezone; pass form
    labels in forms to build only those reports.
    """
    from attendance.models import AttendanceSlip

    target = timezone.localdate() if report_date is None else parse_report_date(report_date)
    slips = AttendanceSlip.objects.filter(date=target).order_by("class_start_time", "id")
    grouped = aggregate_slips(target, slips)
    reports: Dict[str, Dict[str, Any]] = {}
    for level in FormLevel:
        if forms is not None and level.value not in forms:
            continue
        summary = grouped[level.value]
        supervisor = get_supervisor(level)
        context = {
            "form_level": level.value,
            "report_date": target,
            "formatted_date": format_report_date(target),
            "supervisor_name": supervisor["name"],
            "summary": summary,
            "school_name": settings.SCHOOL_NAME,
        }
        reports[level.value] = {
            "form_level": level.value,
            "date": target.isoformat(),
            "supervisor_email": supervisor["email"],
            "supervisor_name": supervisor["name"],
            "has_data": summary is not None,
            "text": render_form_report(level.value, target, summary),
            "html": render_to_string(REPORT_HTML_TEMPLATE, context),
            "context": context,
        }
    logger.info(
        "Built %d supervisor reports for %s (%d with data)",
        len(reports),
        target,
        sum(1 for r in reports.values() if r["has_data"]),
    )
    return reports
