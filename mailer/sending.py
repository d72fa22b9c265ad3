import logging

from anymail.exceptions import AnymailError
from anymail.message import AnymailMessage
from django.conf import settings

from .models import MessageLog
from .rendering import get_email_template, render_email

logger = logging.getLogger(__name__)


def _provider_id(msg):
    status = getattr(msg, "anymail_status", None)
    message_id = getattr(status, "message_id", None)
    if isinstance(message_id, set):
        message_id = ",".join(sorted(message_id))
    return message_id


def send_supervisor_report(campaign, report) -> bool:
    """
    Mail one form's daily report to its supervisor. A report goes out at most
    once per (campaign, form, date); returns False when it was already sent.
    """
    already_sent = MessageLog.objects.filter(
        campaign=campaign,
        form_level=report["form_level"],
        report_date=report["date"],
    ).exists()
    if already_sent:
        logger.info("Report for %s on %s already sent", report["form_level"], report["date"])
        return False
    context = {
        **report["context"],
        "report_text": report["text"],
        "site_url": settings.SITE_URL,
        "subject_vars": {
            "form_level": report["form_level"],
            "date": report["context"]["formatted_date"],
        },
    }
    subject, text, html = render_email(campaign.template, context)
    msg = AnymailMessage(subject=subject, to=[report["supervisor_email"]])
    if text:
        msg.body = text
    msg.attach_alternative(html, "text/html")
    msg.metadata = {
        "campaign_id": campaign.id,
        "form_level": report["form_level"],
        "report_date": report["date"],
    }
    msg.tags = [campaign.name]
    msg.send()
    MessageLog.objects.get_or_create(
        campaign=campaign,
        form_level=report["form_level"],
        report_date=report["date"],
        defaults={"recipient": report["supervisor_email"], "provider_id": _provider_id(msg)},
    )
    logger.info(
        "Sent %s report for %s to %s", report["form_level"], report["date"], report["supervisor_email"]
    )
    return True


def send_slip_confirmation(slip) -> bool:
    """Confirmation to the beadle who submitted a slip. Failures are logged only."""
    from jobs.reports import format_report_date

    template = get_email_template("slip_confirmation")
    context = {
        "slip": slip,
        "beadle_name": slip.beadle_email.split("@", 1)[0],
        "formatted_date": format_report_date(slip.date),
        "school_name": settings.SCHOOL_NAME,
        "site_url": settings.SITE_URL,
        "subject_vars": {"subject": slip.subject, "date": slip.date.isoformat()},
    }
    subject, text, html = render_email(template, context)
    msg = AnymailMessage(subject=subject, to=[slip.beadle_email])
    if text:
        msg.body = text
    msg.attach_alternative(html, "text/html")
    msg.metadata = {"slip_id": slip.id}
    msg.tags = ["slip_confirmation"]
    try:
        msg.send()
    except (AnymailError, OSError):
        logger.exception("Confirmation email for slip %s to %s failed", slip.id, slip.beadle_email)
        return False
    return True
