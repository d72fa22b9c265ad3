import logging
from functools import wraps

from django.contrib.auth.decorators import login_required
from django.http import HttpResponseForbidden, JsonResponse

from .permissions import AmbiguousSupervisorScope, resolve_member

logger = logging.getLogger(__name__)


def _forbidden(request, message):
    if request.path.startswith("/api/"):
        return JsonResponse({"success": False, "error": message}, status=403)
    return HttpResponseForbidden(message)


def require_role(*role_names):
    """
    Decorator to guard views behind one of the given role names.
    The resolved roles are attached to the request as request.member_roles.
    """
    def decorator(view_func):
        @login_required
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            resolved = resolve_member(request.user)
            if not resolved.has(*role_names):
                logger.warning(
                    "Permission denied: member %s lacks %s", request.user.pk, role_names
                )
                return _forbidden(request, "Not authorized")
            request.member_roles = resolved
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def require_supervisor_scope(view_func):
    """
    Decorator for supervisor pages. Resolves the member's form scope once and
    passes it to the view as the "scope" keyword.
    """
    @login_required
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        try:
            resolved = resolve_member(request.user, strict=True)
        except AmbiguousSupervisorScope as exc:
            logger.error("Permission denied for member %s: %s", request.user.pk, exc)
            return _forbidden(
                request,
                "You are assigned to supervise more than one form. "
                "Ask the tech team to keep a single supervisor role.",
            )
        if resolved.scope is None:
            logger.warning("Permission denied: member %s has no supervisor scope", request.user.pk)
            return _forbidden(request, "You are not assigned as a form supervisor.")
        request.member_roles = resolved
        return view_func(request, *args, scope=resolved.scope, **kwargs)
    return _wrapped
