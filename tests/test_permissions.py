from types import SimpleNamespace

import pytest

from accounts.models import FormLevel, User
from accounts.permissions import (
    AmbiguousSupervisorScope,
    SupervisorScope,
    resolve_roles,
    resolve_supervisor_scope,
    scoped_members,
)


@pytest.mark.parametrize(
    "role_name,label,level",
    [
        ("supervisor_1", "1", FormLevel.FIRST),
        ("supervisor_5", "5", FormLevel.FIFTH),
        ("supervisor_6", "6", FormLevel.LOWER_SIXTH),
        ("supervisor_6a", "6A", FormLevel.UPPER_SIXTH),
    ],
)
def test_supervisor_role_resolves_to_single_form(role_name, label, level):
    resolved = resolve_roles(["student", role_name])
    assert resolved.scope == SupervisorScope(level)
    assert resolved.scope.label == label
    assert resolved.scope.role_name == role_name
    assert resolved.is_supervisor


def test_resolver_collects_role_names():
    resolved = resolve_roles([SimpleNamespace(role_name="beadle"), SimpleNamespace(role_name="admin")])
    assert resolved.names == frozenset({"beadle", "admin"})
    assert resolved.is_beadle
    assert resolved.is_admin
    assert resolved.can_manage_roles
    assert not resolved.is_supervisor


def test_member_without_supervisor_role_is_unscoped():
    assert resolve_supervisor_scope(["student", "beadle"]) is None
    assert resolve_roles([]).scope is None


def test_several_supervisor_roles_raise():
    with pytest.raises(AmbiguousSupervisorScope) as excinfo:
        resolve_supervisor_scope(["supervisor_5", "supervisor_4"])
    assert excinfo.value.role_names == ["supervisor_5", "supervisor_4"]


def test_several_supervisor_roles_lenient_resolution_drops_scope():
    resolved = resolve_roles(["supervisor_5", "supervisor_6a"])
    assert resolved.scope is None
    assert "supervisor_5" in resolved.names
    with pytest.raises(AmbiguousSupervisorScope):
        resolve_roles(["supervisor_5", "supervisor_6a"], strict=True)


def test_duplicate_rows_for_same_supervisor_role_are_fine():
    assert resolve_supervisor_scope(["supervisor_5", "supervisor_5"]).label == "5"


@pytest.mark.parametrize(
    "form_class,expected",
    [
        ("5-2", FormLevel.FIFTH),
        ("1-4", FormLevel.FIRST),
        ("6a-1", FormLevel.UPPER_SIXTH),
        ("6B-2", FormLevel.LOWER_SIXTH),
        ("6-1", FormLevel.LOWER_SIXTH),
        ("", None),
        (None, None),
        ("7-1", None),
        ("15-1", None),
    ],
)
def test_form_level_from_form_class(form_class, expected):
    assert FormLevel.from_form_class(form_class) == expected


@pytest.mark.parametrize("value", ["5th Form", "5th", "5", " 5th form "])
def test_form_level_parse_accepts_short_labels(value):
    assert FormLevel.parse(value) == FormLevel.FIFTH


@pytest.mark.django_db
def test_lower_sixth_scope_covers_plain_and_b_suffixed_classes():
    User.objects.create_user(email="a@example.com", password="x", form_class="6-1")
    User.objects.create_user(email="b@example.com", password="x", form_class="6B-1")
    User.objects.create_user(email="c@example.com", password="x", form_class="6A-1")

    lower_sixth = scoped_members(SupervisorScope(FormLevel.LOWER_SIXTH))
    assert sorted(lower_sixth.values_list("email", flat=True)) == ["a@example.com", "b@example.com"]


@pytest.mark.django_db
def test_scoped_members_match_form_class_prefix_case_insensitively():
    User.objects.create_user(email="a@example.com", password="x", form_class="5-2")
    User.objects.create_user(email="b@example.com", password="x", form_class="5-1")
    User.objects.create_user(email="c@example.com", password="x", form_class="4-5")
    User.objects.create_user(email="d@example.com", password="x", form_class="6a-1")
    User.objects.create_user(email="e@example.com", password="x")

    fifth = scoped_members(SupervisorScope(FormLevel.FIFTH))
    assert sorted(fifth.values_list("email", flat=True)) == ["a@example.com", "b@example.com"]

    upper_sixth = scoped_members(SupervisorScope(FormLevel.UPPER_SIXTH))
    assert list(upper_sixth.values_list("email", flat=True)) == ["d@example.com"]
    assert User.objects.get(email="d@example.com").form_class == "6A-1"
