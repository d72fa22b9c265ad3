import json
import logging

from django.contrib import messages
from django.db import DatabaseError
from django.db.models import Q
from django.http import HttpResponseBadRequest, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import require_role, require_supervisor_scope
from accounts.forms import FormClassForm
from accounts.models import Role, User
from accounts.permissions import ROLE_MANAGER_ROLES, resolve_roles, scoped_members
from accounts.roles import (
    BEADLE_ROLE,
    DEFAULT_ROLE,
    RoleNotFound,
    add_role_to_member,
    bulk_update_roles,
    members_with_roles,
    member_has_role,
    remove_role_from_member,
    serialize_member,
    set_member_roles,
)

logger = logging.getLogger(__name__)

BULK_ROLES = {DEFAULT_ROLE, BEADLE_ROLE}


def _search(queryset, query):
    if not query:
        return queryset
    return queryset.filter(
        Q(full_name__icontains=query) | Q(email__icontains=query) | Q(form_class__icontains=query)
    )


def _member_rows(members):
    rows = []
    for member in members:
        resolved = resolve_roles(member.roles.all())
        rows.append({"member": member, "roles": sorted(resolved.names), "is_beadle": resolved.is_beadle})
    return rows


@require_supervisor_scope
def dashboard(request, scope):
    query = (request.GET.get("q") or "").strip()
    members = members_with_roles(_search(scoped_members(scope), query))
    rows = _member_rows(members)
    ctx = {
        "scope": scope,
        "rows": rows,
        "q": query,
        "beadle_count": sum(1 for r in rows if r["is_beadle"]),
        "active_nav": "supervisor",
    }
    return render(request, "supervision/dashboard.html", ctx)


@require_supervisor_scope
@require_POST
def toggle_beadle(request, member_id, scope):
    member = get_object_or_404(scoped_members(scope), pk=member_id)
    if member_has_role(member, BEADLE_ROLE):
        remove_role_from_member(member, BEADLE_ROLE)
        messages.success(request, f"{member} is no longer a beadle.")
    else:
        add_role_to_member(member, BEADLE_ROLE, assigned_by=request.user)
        messages.success(request, f"{member} is now a beadle.")
    return redirect("supervision:dashboard")


@require_supervisor_scope
@require_POST
def bulk_update(request, scope):
    new_role = request.POST.get("role")
    if new_role not in BULK_ROLES:
        return HttpResponseBadRequest("role must be student or beadle")
    requested = request.POST.getlist("member_ids")
    ids = list(scoped_members(scope).filter(pk__in=[i for i in requested if i.isdigit()]).values_list("pk", flat=True))
    if not ids:
        messages.warning(request, "Select at least one student.")
        return redirect("supervision:dashboard")
    result = bulk_update_roles(ids, new_role, assigned_by=request.user)
    if result.success:
        messages.success(request, f"Updated {result.success_count} student(s) to {new_role}.")
    else:
        messages.error(request, "; ".join(result.errors))
    return redirect("supervision:dashboard")


@require_supervisor_scope
@require_POST
def update_form_class(request, member_id, scope):
    member = get_object_or_404(scoped_members(scope), pk=member_id)
    form = FormClassForm(request.POST)
    if not form.is_valid():
        messages.error(request, form.errors["form_class"][0])
        return redirect("supervision:dashboard")
    member.form_class = form.cleaned_data["form_class"]
    member.save(update_fields=["form_class", "updated_at"])
    logger.info("Member %s moved to form class %s by %s", member.pk, member.form_class, request.user.pk)
    messages.success(request, f"Successfully updated form class to {member.form_class or 'none'}")
    return redirect("supervision:dashboard")


@require_role(*ROLE_MANAGER_ROLES)
def role_management(request):
    if request.method == "POST":
        member_id = request.POST.get("member_id") or ""
        if not member_id.isdigit():
            return HttpResponseBadRequest("member_id is required")
        member = get_object_or_404(User, pk=member_id)
        try:
            set_member_roles(member, request.POST.getlist("roles"), assigned_by=request.user)
        except RoleNotFound as exc:
            messages.error(request, str(exc))
        else:
            messages.success(request, f"Roles updated for {member}.")
        return redirect("supervision:role_management")
    query = (request.GET.get("q") or "").strip()
    ctx = {
        "rows": _member_rows(members_with_roles(_search(User.objects.all(), query))),
        "all_roles": Role.objects.order_by("permission_level", "role_name"),
        "q": query,
        "active_nav": "role_management",
    }
    return render(request, "supervision/role_management.html", ctx)


@require_role(*ROLE_MANAGER_ROLES)
@require_GET
def api_users_list(request):
    try:
        users = [serialize_member(m) for m in members_with_roles()]
    except DatabaseError:
        logger.exception("Error fetching users")
        return JsonResponse({"success": False, "error": "Failed to fetch users"}, status=500)
    return JsonResponse({"success": True, "users": users})


@require_role(*ROLE_MANAGER_ROLES)
@require_POST
def api_update_roles(request):
    try:
        body = json.loads(request.body or b"{}")
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    user_id = body.get("userId")
    roles = body.get("roles")
    if not str(user_id or "").isdigit() or not isinstance(roles, list):
        return JsonResponse({"success": False, "error": "Invalid input"}, status=400)
    member = User.objects.filter(pk=user_id).first()
    if member is None:
        return JsonResponse({"success": False, "error": "User not found"}, status=404)
    try:
        set_member_roles(member, roles, assigned_by=request.user)
    except RoleNotFound as exc:
        return JsonResponse({"success": False, "error": str(exc)}, status=400)
    member = members_with_roles(User.objects.filter(pk=member.pk)).get()
    return JsonResponse(
        {"success": True, "message": "Roles updated successfully", "user": serialize_member(member)}
    )
