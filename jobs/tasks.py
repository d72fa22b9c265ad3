import logging

from django_rq import job
from django.utils import timezone

from accounts.models import FormLevel
from mailer.models import Campaign
from mailer.sending import send_supervisor_report
from .reports import build_supervisor_reports, parse_report_date

logger = logging.getLogger(__name__)


@job("default")
def kickoff_campaign(campaign_id: int, report_date: str | None = None):
    campaign = Campaign.objects.get(pk=campaign_id)
    if not campaign.enabled:
        logger.info("Campaign %s is disabled, skipping", campaign.name)
        return
    target = timezone.localdate() if report_date is None else parse_report_date(report_date)
    # mark last run time
    campaign.last_run_at = timezone.now()
    campaign.save(update_fields=["last_run_at"])
    for level in FormLevel:
        send_form_report.delay(campaign_id, level.value, target.isoformat())
    logger.info("Queued %d form reports of %s for %s", len(FormLevel), campaign.name, target)


@job("mail")
def send_form_report(campaign_id: int, form_label: str, report_date: str) -> bool:
    campaign = Campaign.objects.select_related("template").get(pk=campaign_id)
    reports = build_supervisor_reports(report_date, forms=[form_label])
    report = reports.get(form_label)
    if report is None:
        logger.error("Unknown form %r for campaign %s", form_label, campaign.name)
        return False
    return send_supervisor_report(campaign, report)
