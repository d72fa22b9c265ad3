import logging

from anymail.signals import tracking
from django.dispatch import receiver

from .models import Campaign, EmailEvent

logger = logging.getLogger(__name__)


@receiver(tracking)
def handle_tracking(sender, event, esp_name, **kwargs):
    metadata = event.metadata or {}
    campaign_id = metadata.get("campaign_id")
    if campaign_id and not Campaign.objects.filter(pk=campaign_id).exists():
        campaign_id = None
    EmailEvent.objects.create(
        campaign_id=campaign_id,
        form_level=metadata.get("form_level") or "",
        event=event.event_type,
        provider_id=event.message_id or event.event_id,
        email=event.recipient or "",
        payload=event.esp_event if isinstance(event.esp_event, dict) else {},
    )
    if event.event_type in {"bounced", "rejected", "complained"}:
        logger.warning(
            "%s reported %s for %s (%s)",
            esp_name,
            event.event_type,
            event.recipient,
            metadata.get("form_level") or "no form",
        )
