import json
import logging

from django.conf import settings
from django.contrib import messages
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_http_methods, require_POST

from accounts.decorators import require_role
from accounts.permissions import ADMIN_ROLES
from attendance.services import slip_store_summary
from jobs.reports import ReportDateError, build_supervisor_reports, parse_report_date
from .models import Campaign, MessageLog

logger = logging.getLogger(__name__)


def _daily_campaign():
    return Campaign.objects.filter(name=settings.DAILY_REPORT_CAMPAIGN).first()


def _serialize_report(report):
    return {
        "formLevel": report["form_level"],
        "date": report["date"],
        "supervisorEmail": report["supervisor_email"],
        "supervisorName": report["supervisor_name"],
        "hasData": report["has_data"],
        "textContent": report["text"],
        "htmlContent": report["html"],
    }


@require_role(*ADMIN_ROLES)
def email_reports(request):
    date_value = request.GET.get("date") or timezone.localdate().isoformat()
    reports = {}
    sent = set()
    try:
        report_date = parse_report_date(date_value)
    except ReportDateError as exc:
        messages.error(request, str(exc))
        report_date = None
    if report_date is not None:
        reports = build_supervisor_reports(report_date)
        campaign = _daily_campaign()
        if campaign is not None:
            sent = set(
                MessageLog.objects.filter(campaign=campaign, report_date=report_date).values_list(
                    "form_level", flat=True
                )
            )
    ctx = {
        "date_value": date_value,
        "reports": [dict(r, sent=r["form_level"] in sent) for r in reports.values()],
        "active_nav": "email_reports",
    }
    return render(request, "mailer/email_reports.html", ctx)


@require_role(*ADMIN_ROLES)
@require_POST
def send_reports(request):
    from jobs.tasks import send_form_report

    campaign = _daily_campaign()
    if campaign is None:
        messages.error(request, "The daily report campaign is not set up.")
        return redirect("mailer:email_reports")
    try:
        report_date = parse_report_date(request.POST.get("date"))
    except ReportDateError as exc:
        messages.error(request, str(exc))
        return redirect("mailer:email_reports")
    forms = request.POST.getlist("form") or list(build_supervisor_reports(report_date))
    for form_label in forms:
        send_form_report.delay(campaign.id, form_label, report_date.isoformat())
    logger.info("Member %s queued %d reports for %s", request.user.pk, len(forms), report_date)
    messages.success(request, f"Queued {len(forms)} report(s) for {report_date:%Y-%m-%d}.")
    return redirect(f"{reverse('mailer:email_reports')}?date={report_date.isoformat()}")


@require_role(*ADMIN_ROLES)
@require_http_methods(["GET", "POST"])
def api_email_reports(request):
    if request.method == "GET":
        try:
            return JsonResponse(slip_store_summary())
        except DatabaseError:
            logger.exception("Failed to fetch slips")
            return JsonResponse({"error": "Failed to fetch slips"}, status=500)

    try:
        body = json.loads(request.body or b"{}")
    except ValueError:
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    if not isinstance(body, dict):
        return JsonResponse({"error": "Invalid JSON"}, status=400)
    action = body.get("action")
    logger.info("Email reports request: action=%s date=%s", action, body.get("date"))
    try:
        if action == "generate":
            if not body.get("date"):
                return JsonResponse({"error": "Date is required"}, status=400)
            reports = build_supervisor_reports(parse_report_date(body["date"]))
        elif action == "scheduled":
            reports = build_supervisor_reports()
        else:
            return JsonResponse({"error": "Invalid action"}, status=400)
    except ReportDateError as exc:
        return JsonResponse({"error": str(exc)}, status=400)
    except DatabaseError:
        logger.exception("Failed to generate reports")
        return JsonResponse({"error": "Failed to generate reports"}, status=500)
    return JsonResponse({"reports": {label: _serialize_report(r) for label, r in reports.items()}})
