import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.decorators import require_role
from accounts.permissions import ADMIN_ROLES, resolve_member
from .forms import AnnouncementForm
from .models import Announcement
from .services import get_recent_announcements

logger = logging.getLogger(__name__)


@login_required
def announcements(request):
    ctx = {
        "announcements": get_recent_announcements(limit=None),
        "form": AnnouncementForm(),
        "can_manage": resolve_member(request.user).is_admin,
        "active_nav": "announcements",
    }
    return render(request, "content/announcements.html", ctx)


@require_role(*ADMIN_ROLES)
@require_POST
def create_announcement(request):
    form = AnnouncementForm(request.POST)
    if form.is_valid():
        ann = form.save(commit=False)
        ann.created_by = request.user
        ann.save()
        logger.info("Announcement %s created by %s", ann.pk, request.user.pk)
        messages.success(request, "Announcement posted")
    else:
        messages.error(request, "Title and content are required")
    return redirect("content:announcements")


@require_role(*ADMIN_ROLES)
@require_POST
def delete_announcement(request, pk: int):
    ann = get_object_or_404(Announcement, pk=pk)
    ann.delete()
    logger.info("Announcement %s deleted by %s", pk, request.user.pk)
    messages.success(request, "Announcement deleted")
    return redirect("content:announcements")
