import json
import logging

from django.contrib import messages
from django.contrib.auth import update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.contrib.auth.forms import PasswordChangeForm
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from content.services import get_recent_announcements
from .forms import ProfileForm
from .permissions import resolve_member
from .roles import serialize_member

logger = logging.getLogger(__name__)


def home(request):
    if not request.user.is_authenticated:
        return redirect("account_login")
    roles = resolve_member(request.user)
    ctx = {
        "name": request.user.get_short_name(),
        "roles": roles,
        "announcements": get_recent_announcements(),
        "active_nav": "dashboard",
    }
    return render(request, "home.html", ctx)


@login_required
def profile(request):
    if request.method == "POST":
        form = ProfileForm(request.POST, instance=request.user)
        if form.is_valid():
            form.save()
            messages.success(request, "Profile updated successfully")
            return redirect("accounts:profile")
    else:
        form = ProfileForm(instance=request.user)
    return render(
        request,
        "accounts/profile.html",
        {
            "form": form,
            "password_form": PasswordChangeForm(request.user),
            "active_nav": "profile",
        },
    )


@login_required
@require_POST
def change_password(request):
    form = PasswordChangeForm(request.user, request.POST)
    if form.is_valid():
        user = form.save()
        update_session_auth_hash(request, user)
        messages.success(request, "Password changed successfully")
        return redirect("accounts:profile")
    return render(
        request,
        "accounts/profile.html",
        {
            "form": ProfileForm(instance=request.user),
            "password_form": form,
            "active_nav": "profile",
        },
        status=400,
    )


def _json_body(request):
    try:
        body = json.loads(request.body or b"{}")
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _first_error(form):
    for errors in form.errors.values():
        return errors[0]
    return "Invalid input"


@login_required
@require_GET
def api_profile(request):
    return JsonResponse({"success": True, "user": serialize_member(request.user)})


@login_required
@require_POST
def api_profile_update(request):
    body = _json_body(request)
    if body is None:
        return JsonResponse({"success": False, "error": "Invalid JSON"}, status=400)
    form = ProfileForm(
        {"full_name": body.get("full_name", ""), "form_class": body.get("form_class") or ""},
        instance=request.user,
    )
    if not form.is_valid():
        return JsonResponse({"success": False, "error": _first_error(form)}, status=400)
    form.save()
    return JsonResponse({"success": True, "message": "Profile updated successfully"})


@login_required
@require_POST
def api_change_password(request):
    body = _json_body(request)
    if body is None:
        return JsonResponse({"success": False, "error": "Invalid JSON"}, status=400)
    current = body.get("currentPassword") or body.get("current_password")
    new = body.get("newPassword") or body.get("new_password")
    if not current or not new:
        return JsonResponse(
            {"success": False, "error": "Current and new passwords are required"},
            status=400,
        )
    form = PasswordChangeForm(
        request.user,
        {"old_password": current, "new_password1": new, "new_password2": new},
    )
    if not form.is_valid():
        return JsonResponse({"success": False, "error": _first_error(form)}, status=400)
    user = form.save()
    update_session_auth_hash(request, user)
    logger.info("Password changed for member %s", user.pk)
    return JsonResponse({"success": True, "message": "Password changed successfully"})
