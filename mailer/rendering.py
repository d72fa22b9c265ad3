from django.template.loader import render_to_string

from .models import EmailTemplate

DEFAULT_TEMPLATES = {
    "supervisor_report": {
        "subject_template": "Daily Beadle Report - {form_level} - {date}",
        "html_template_path": "emails/supervisor_report.html",
        "text_template_path": "emails/supervisor_report.txt",
    },
    "slip_confirmation": {
        "subject_template": "Beadle Slip Confirmation - {subject} ({date})",
        "html_template_path": "emails/slip_confirmation.html",
        "text_template_path": "emails/slip_confirmation.txt",
    },
}


def get_email_template(key):
    template, _ = EmailTemplate.objects.get_or_create(key=key, defaults=DEFAULT_TEMPLATES[key])
    return template


def render_email(template, context):
    subject = template.subject_template.format(**context.get("subject_vars", {}))
    html_body = render_to_string(template.html_template_path, context)
    text_body = render_to_string(template.text_template_path, context) if template.text_template_path else None
    return subject, text_body, html_body
