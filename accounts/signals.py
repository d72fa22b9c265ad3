import logging
from urllib.parse import urlparse

from django.conf import settings
from django.contrib.sites.models import Site
from django.db.models.signals import post_migrate, post_save
from django.dispatch import receiver

from .models import User
from .roles import DEFAULT_ROLE, RoleNotFound, add_role_to_member

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def ensure_default_role(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    try:
        add_role_to_member(instance, DEFAULT_ROLE)
    except RoleNotFound:
        logger.warning("No %s role defined; member %s has no roles", DEFAULT_ROLE, instance.pk)


@receiver(post_migrate)
def sync_site_domain(sender, **kwargs):
    site_url = getattr(settings, "SITE_URL", "")
    if not site_url or sender.name != "accounts":
        return
    host = urlparse(site_url).hostname or "example.com"
    sid = getattr(settings, "SITE_ID", 1)
    Site.objects.update_or_create(id=sid, defaults={"domain": host, "name": host})
