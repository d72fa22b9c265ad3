from .permissions import resolve_member


def member_roles(request):
    roles = getattr(request, "member_roles", None)
    user = getattr(request, "user", None)
    if roles is None and user is not None:
        roles = resolve_member(user)
    return {"member_roles": roles}
