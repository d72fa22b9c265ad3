import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from django.db import transaction
from django.db.models import Max, Prefetch

from .models import MemberRole, Role, User

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "student"
BEADLE_ROLE = "beadle"


class RoleNotFound(Exception):
    def __init__(self, role_name):
        super().__init__(f"Role '{role_name}' not found")
        self.role_name = role_name


@dataclass
class BulkRoleResult:
    success_count: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def get_role(role_name: str) -> Role:
    role = Role.objects.filter(role_name=role_name).first()
    if role is None:
        raise RoleNotFound(role_name)
    return role


def get_member_roles(member):
    return Role.objects.filter(member_links__member=member).order_by(
        "permission_level", "role_name"
    )


def get_member_role_names(member) -> List[str]:
    return list(get_member_roles(member).values_list("role_name", flat=True))


def member_has_role(member, role_name: str) -> bool:
    return MemberRole.objects.filter(member=member, role__role_name=role_name).exists()


def member_has_any_role(member, role_names: Iterable[str]) -> bool:
    return MemberRole.objects.filter(
        member=member, role__role_name__in=list(role_names)
    ).exists()


def get_member_permission_level(member) -> int:
    level = MemberRole.objects.filter(member=member).aggregate(
        level=Max("role__permission_level")
    )["level"]
    return level or 0


def add_role_to_member(member, role_name: str, assigned_by: Optional[User] = None) -> bool:
    """Assign a role; returns False when the member already held it."""
    role = get_role(role_name)
    _, created = MemberRole.objects.get_or_create(
        member=member, role=role, defaults={"assigned_by": assigned_by}
    )
    if created:
        member.save(update_fields=["updated_at"])
        logger.info("Role %s added to member %s", role_name, member.pk)
    return created


def remove_role_from_member(member, role_name: str) -> None:
    """Drop a role. A member left with no roles falls back to the student role."""
    role = get_role(role_name)
    with transaction.atomic():
        MemberRole.objects.filter(member=member, role=role).delete()
        if not MemberRole.objects.filter(member=member).exists():
            add_role_to_member(member, DEFAULT_ROLE)
        member.save(update_fields=["updated_at"])
    logger.info("Role %s removed from member %s", role_name, member.pk)


def set_member_roles(member, role_names: Iterable[str], assigned_by: Optional[User] = None) -> None:
    names = list(dict.fromkeys(role_names))
    roles = [get_role(name) for name in names]
    if not roles:
        roles = [get_role(DEFAULT_ROLE)]
    with transaction.atomic():
        MemberRole.objects.filter(member=member).delete()
        MemberRole.objects.bulk_create(
            [MemberRole(member=member, role=role, assigned_by=assigned_by) for role in roles]
        )
        member.save(update_fields=["updated_at"])
    logger.info(
        "Roles for member %s set to %s", member.pk, [r.role_name for r in roles]
    )


def bulk_update_roles(member_ids: Iterable, new_role: str, assigned_by: Optional[User] = None) -> BulkRoleResult:
    """
    Apply one role change to many members.

    Promoting is additive: the new role is added next to whatever the member
    already holds. Moving members back to "student" removes the beadle role.
    """
    get_role(new_role)
    result = BulkRoleResult()
    for member_id in member_ids:
        member = User.objects.filter(pk=member_id).first()
        if member is None:
            result.errors.append(f"Member {member_id} not found")
            continue
        if new_role == DEFAULT_ROLE:
            if member_has_role(member, BEADLE_ROLE):
                remove_role_from_member(member, BEADLE_ROLE)
            add_role_to_member(member, DEFAULT_ROLE, assigned_by)
        else:
            add_role_to_member(member, new_role, assigned_by)
        result.success_count += 1
    if result.errors:
        logger.warning("Bulk role update to %s: %s", new_role, "; ".join(result.errors))
    return result


def get_members_by_role(role_name: str):
    return User.objects.filter(role_links__role__role_name=role_name).distinct().order_by("full_name", "email")


def members_with_roles(queryset=None):
    """Members with their role rows prefetched in resolver order."""
    if queryset is None:
        queryset = User.objects.all()
    ordered_roles = Role.objects.order_by("permission_level", "role_name")
    return queryset.order_by("full_name", "email").prefetch_related(
        Prefetch("roles", queryset=ordered_roles)
    )


def serialize_member(member) -> dict:
    roles = list(member.roles.all())
    return {
        "id": member.id,
        "email": member.email,
        "full_name": member.full_name,
        "form_class": member.form_class,
        "created_at": member.created_at.isoformat() if member.created_at else None,
        "roles": [r.role_name for r in roles],
        "roleDetails": [
            {
                "role_name": r.role_name,
                "display_name": r.display_name,
                "role_type": r.role_type,
                "permission_level": r.permission_level,
            }
            for r in roles
        ],
    }
