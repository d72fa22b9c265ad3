import pytest

from accounts.models import Role, User
from accounts.roles import set_member_roles

MODEL_BACKEND = "django.contrib.auth.backends.ModelBackend"

ROLE_ROWS = [
    ("student", "Student", "primary", 1),
    ("beadle", "Beadle", "sub", 2),
    ("supervisor_1", "1st Form Supervisor", "sub", 3),
    ("supervisor_2", "2nd Form Supervisor", "sub", 3),
    ("supervisor_3", "3rd Form Supervisor", "sub", 3),
    ("supervisor_4", "4th Form Supervisor", "sub", 3),
    ("supervisor_5", "5th Form Supervisor", "sub", 3),
    ("supervisor_6", "6B Supervisor", "sub", 3),
    ("supervisor_6a", "6A Supervisor", "sub", 3),
    ("tech_team", "Tech Team", "primary", 4),
    ("admin", "Administrator", "primary", 4),
    ("super_admin", "Super Administrator", "primary", 5),
]


@pytest.fixture
def roles(db):
    for name, display, role_type, level in ROLE_ROWS:
        Role.objects.get_or_create(
            role_name=name,
            defaults={"display_name": display, "role_type": role_type, "permission_level": level},
        )
    return Role.objects.all()


@pytest.fixture
def make_member(roles):
    def _make(email, full_name="Test Member", form_class=None, role_names=None, password="secret123"):
        member = User.objects.create_user(
            email=email, password=password, full_name=full_name, form_class=form_class
        )
        if role_names is not None:
            set_member_roles(member, role_names)
        return member

    return _make


@pytest.fixture
def login(client):
    def _login(member):
        client.force_login(member, backend=MODEL_BACKEND)
        return client

    return _login


@pytest.fixture
def slip_data():
    return {
        "grade_level": "5th Form",
        "class_name": "5-2",
        "date": "2025-01-10",
        "class_start_time": "08:00",
        "class_end_time": "",
        "teacher": "Mr. Brown",
        "subject": "Mathematics",
        "teacher_present": "yes",
        "teacher_arrival_time": "08:05",
        "substitute_received": "yes",
        "homework_given": "no",
        "students_present": "28",
        "absent_students": "Ann Lee\n\n  Bob Ray  ",
        "late_students": "",
    }
