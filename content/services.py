from .models import Announcement

RECENT_LIMIT = 10


def get_recent_announcements(limit: int | None = RECENT_LIMIT):
    """Newest first. With limit=None every announcement is returned."""
    qs = Announcement.objects.select_related("created_by").order_by("-created_at", "-id")
    if limit is not None:
        qs = qs[:limit]
    return list(qs)
