import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounts.decorators import require_role, require_supervisor_scope
from accounts.models import FormLevel
from accounts.permissions import ADMIN_ROLES
from jobs.reports import generate_all_supervisor_reports
from mailer.sending import send_slip_confirmation
from .forms import SlipForm
from .models import AttendanceSlip
from .services import filter_slips, slip_totals, slips_for_member

logger = logging.getLogger(__name__)


def _date_param(request):
    raw = (request.GET.get("date") or "").strip()
    try:
        return parse_date(raw) if raw else None
    except ValueError:
        return None


@require_role("beadle")
def submit_slip(request):
    if request.method == "POST":
        form = SlipForm(request.POST)
        if form.is_valid():
            slip = form.save(commit=False)
            slip.beadle_email = request.user.email
            slip.save()
            logger.info("Slip %s submitted by %s for %s", slip.pk, slip.beadle_email, slip.grade_level)
            if send_slip_confirmation(slip):
                messages.success(request, "Slip submitted. A confirmation email is on its way.")
            else:
                messages.warning(request, "Slip submitted, but the confirmation email could not be sent.")
            return redirect("attendance:my_submissions")
    else:
        level = FormLevel.from_form_class(request.user.form_class)
        form = SlipForm(
            initial={
                "grade_level": level.value if level else None,
                "date": timezone.localdate(),
                "homework_given": "no",
            }
        )
    return render(request, "attendance/submit.html", {"form": form, "active_nav": "beadle"})


@require_role("beadle")
def my_submissions(request):
    query = (request.GET.get("q") or "").strip()
    on_date = _date_param(request)
    slips = list(slips_for_member(request.user, query=query, on_date=on_date))
    ctx = {
        "slips": slips,
        "totals": slip_totals(slips),
        "q": query,
        "date_value": on_date.isoformat() if on_date else "",
        "active_nav": "my_submissions",
    }
    return render(request, "attendance/my_submissions.html", ctx)


@require_role(*ADMIN_ROLES)
def slip_dashboard(request):
    on_date = _date_param(request)
    level = FormLevel.parse(request.GET.get("form"))
    qs = filter_slips(
        AttendanceSlip.objects.all(),
        query=(request.GET.get("q") or "").strip(),
        on_date=on_date,
        grade_level=level.value if level else None,
    )
    slips = list(qs.order_by("-date", "grade_level", "class_start_time", "id"))
    ctx = {
        "slips": slips,
        "totals": slip_totals(slips),
        "form_levels": FormLevel.choices,
        "selected_form": level.value if level else "",
        "date_value": on_date.isoformat() if on_date else "",
        "q": request.GET.get("q", ""),
        "active_nav": "slips",
    }
    return render(request, "attendance/dashboard.html", ctx)


@require_supervisor_scope
def supervisor_reports(request, scope):
    on_date = _date_param(request) or timezone.localdate()
    level = scope.form_level
    slips = list(
        AttendanceSlip.objects.filter(grade_level=level.value, date=on_date).order_by("class_start_time", "id")
    )
    report_text = generate_all_supervisor_reports(on_date, slips)[level.value]
    ctx = {
        "scope": scope,
        "form_level": level.value,
        "slips": slips,
        "totals": slip_totals(slips),
        "report_text": report_text,
        "date_value": on_date.isoformat(),
        "active_nav": "supervisor_reports",
    }
    return render(request, "attendance/supervisor_reports.html", ctx)
