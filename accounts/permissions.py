import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional

from .models import FormLevel

logger = logging.getLogger(__name__)

SUPERVISOR_ROLES = {
    "supervisor_1": FormLevel.FIRST,
    "supervisor_2": FormLevel.SECOND,
    "supervisor_3": FormLevel.THIRD,
    "supervisor_4": FormLevel.FOURTH,
    "supervisor_5": FormLevel.FIFTH,
    "supervisor_6": FormLevel.LOWER_SIXTH,
    "supervisor_6a": FormLevel.UPPER_SIXTH,
}
ROLE_FOR_FORM = {level: name for name, level in SUPERVISOR_ROLES.items()}

ADMIN_ROLES = frozenset({"admin", "super_admin"})
ROLE_MANAGER_ROLES = frozenset({"tech_team", "admin", "super_admin"})


class AmbiguousSupervisorScope(Exception):
    """A member holds supervisor roles for more than one form."""

    def __init__(self, role_names):
        super().__init__(
            "Member holds several supervisor roles: " + ", ".join(role_names)
        )
        self.role_names = list(role_names)


@dataclass(frozen=True)
class SupervisorScope:
    form_level: FormLevel

    @property
    def label(self) -> str:
        return self.form_level.number

    @property
    def role_name(self) -> str:
        return ROLE_FOR_FORM[self.form_level]


@dataclass(frozen=True)
class ResolvedRoles:
    names: FrozenSet[str]
    scope: Optional[SupervisorScope]

    def has(self, *role_names: str) -> bool:
        return any(name in self.names for name in role_names)

    @property
    def is_admin(self) -> bool:
        return bool(self.names & ADMIN_ROLES)

    @property
    def is_beadle(self) -> bool:
        return "beadle" in self.names

    @property
    def can_manage_roles(self) -> bool:
        return bool(self.names & ROLE_MANAGER_ROLES)

    @property
    def is_supervisor(self) -> bool:
        return self.scope is not None


def _role_name(row) -> str:
    if isinstance(row, str):
        return row
    return getattr(row, "role_name", "")


def resolve_role_names(role_rows: Iterable) -> FrozenSet[str]:
    return frozenset(name for name in (_role_name(r) for r in role_rows) if name)


def resolve_supervisor_scope(role_rows: Iterable) -> Optional[SupervisorScope]:
    """
    Supervisor scope for a member's role rows.

    Returns None when the member supervises no form. Raises
    AmbiguousSupervisorScope when the rows name more than one form.
    """
    matches: List[str] = []
    for row in role_rows:
        name = _role_name(row)
        if name in SUPERVISOR_ROLES and name not in matches:
            matches.append(name)
    if not matches:
        return None
    if len(matches) > 1:
        raise AmbiguousSupervisorScope(matches)
    return SupervisorScope(SUPERVISOR_ROLES[matches[0]])


def resolve_roles(role_rows: Iterable, strict: bool = False) -> ResolvedRoles:
    """
    Decode role rows once. With strict=False an ambiguous supervisor scope
    resolves to no scope (and is logged) so non-supervisor pages keep working.
    """
    rows = list(role_rows)
    try:
        scope = resolve_supervisor_scope(rows)
    except AmbiguousSupervisorScope as exc:
        if strict:
            raise
        logger.warning("Ignoring supervisor scope: %s", exc)
        scope = None
    return ResolvedRoles(names=resolve_role_names(rows), scope=scope)


def resolve_member(user, strict: bool = False) -> ResolvedRoles:
    if not getattr(user, "is_authenticated", False):
        return ResolvedRoles(names=frozenset(), scope=None)
    return resolve_roles(user.roles.all(), strict=strict)


def scoped_members(scope: SupervisorScope, queryset=None):
    from .models import User

    if queryset is None:
        queryset = User.objects.all()
    return queryset.filter(form_level=scope.form_level.value)
