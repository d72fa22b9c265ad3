import json
from datetime import date, time

import pytest
from django.core import mail
from django.urls import reverse

from accounts.roles import get_member_role_names
from attendance.models import AttendanceSlip
from attendance.services import slip_store_summary
from content.models import Announcement

pytestmark = pytest.mark.django_db


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def test_home_requires_login(client):
    response = client.get(reverse("home"))
    assert response.status_code == 302
    assert reverse("account_login") in response["Location"]


def test_home_shows_announcements(login, make_member):
    member = make_member("a@example.com", full_name="Ann Lee")
    Announcement.objects.create(title="Sports day", priority="high", content="Friday")
    response = login(member).get(reverse("home"))
    assert response.status_code == 200
    assert b"Welcome, Ann" in response.content
    assert b"Sports day" in response.content


def test_beadle_submits_slip(login, make_member, slip_data):
    beadle = make_member("beadle@example.com", form_class="5-2", role_names=["beadle"])
    response = login(beadle).post(reverse("attendance:submit"), slip_data)

    assert response.status_code == 302
    assert response["Location"] == reverse("attendance:my_submissions")
    slip = AttendanceSlip.objects.get()
    assert slip.beadle_email == "beadle@example.com"
    assert slip.class_end_time == time(8, 35)
    assert slip.substitute_received is None
    assert slip.teacher_arrival_time == time(8, 5)
    assert slip.absent_students == ["Ann Lee", "Bob Ray"]
    assert slip.late_students == []
    assert mail.outbox[0].to == ["beadle@example.com"]


def test_double_session_runs_seventy_minutes(login, make_member, slip_data):
    beadle = make_member("beadle@example.com", role_names=["beadle"])
    slip_data.update(is_double_session="on", teacher_present="no", substitute_received="no")
    login(beadle).post(reverse("attendance:submit"), slip_data)
    slip = AttendanceSlip.objects.get()
    assert slip.class_end_time == time(9, 10)
    assert slip.teacher_arrival_time is None
    assert slip.substitute_received == "no"


def test_slip_class_must_match_form(login, make_member, slip_data):
    beadle = make_member("beadle@example.com", role_names=["beadle"])
    slip_data["class_name"] = "4-1"
    response = login(beadle).post(reverse("attendance:submit"), slip_data)
    assert response.status_code == 200
    assert "class_name" in response.context["form"].errors
    assert not AttendanceSlip.objects.exists()


def test_slip_end_time_must_follow_start(login, make_member, slip_data):
    beadle = make_member("beadle@example.com", role_names=["beadle"])
    slip_data["class_end_time"] = "07:30"
    response = login(beadle).post(reverse("attendance:submit"), slip_data)
    assert "class_end_time" in response.context["form"].errors
    assert not AttendanceSlip.objects.exists()


def test_students_cannot_submit_slips(login, make_member, slip_data):
    student = make_member("s@example.com")
    response = login(student).post(reverse("attendance:submit"), slip_data)
    assert response.status_code == 403
    assert not AttendanceSlip.objects.exists()


def _slip(**overrides):
    fields = {
        "beadle_email": "beadle@example.com",
        "grade_level": "5th Form",
        "class_name": "5-2",
        "class_start_time": time(8, 0),
        "class_end_time": time(8, 35),
        "date": date(2025, 1, 10),
        "teacher": "Mr. Brown",
        "subject": "Mathematics",
        "teacher_present": "yes",
        "students_present": 20,
    }
    fields.update(overrides)
    return AttendanceSlip.objects.create(**fields)


def test_my_submissions_filters_own_slips(login, make_member):
    beadle = make_member("beadle@example.com", role_names=["beadle"])
    _slip()
    _slip(subject="Biology", date=date(2025, 1, 9))
    _slip(beadle_email="other@example.com", subject="Chemistry")
    client = login(beadle)

    response = client.get(reverse("attendance:my_submissions"))
    assert [s.subject for s in response.context["slips"]] == ["Mathematics", "Biology"]

    response = client.get(reverse("attendance:my_submissions"), {"q": "bio"})
    assert [s.subject for s in response.context["slips"]] == ["Biology"]

    response = client.get(reverse("attendance:my_submissions"), {"date": "2025-01-10"})
    assert [s.subject for s in response.context["slips"]] == ["Mathematics"]


def test_admin_dashboard_filters_by_form(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    _slip(absent_students=["A", "B"])
    _slip(grade_level="6A", class_name="6A-1")
    response = login(admin).get(reverse("attendance:dashboard"), {"form": "5th Form"})
    assert response.status_code == 200
    assert len(response.context["slips"]) == 1
    assert response.context["totals"]["absent"] == 2


def test_supervisor_reports_show_only_their_form(login, make_member):
    supervisor = make_member("sup@example.com", role_names=["supervisor_5"])
    _slip()
    _slip(grade_level="4th Form", class_name="4-1")
    response = login(supervisor).get(reverse("attendance:supervisor_reports"), {"date": "2025-01-10"})
    assert response.status_code == 200
    assert [s.grade_level for s in response.context["slips"]] == ["5th Form"]
    assert "Reports submitted: 1" in response.context["report_text"]


def test_supervisor_dashboard_lists_scoped_students(login, make_member):
    supervisor = make_member("sup@example.com", role_names=["supervisor_5"])
    make_member("in@example.com", form_class="5-2")
    make_member("also@example.com", form_class="5-1")
    make_member("out@example.com", form_class="4-2")
    response = login(supervisor).get(reverse("supervision:dashboard"))
    assert response.status_code == 200
    emails = sorted(row["member"].email for row in response.context["rows"])
    assert emails == ["also@example.com", "in@example.com"]


def test_unscoped_member_is_denied_supervisor_pages(login, make_member):
    student = make_member("s@example.com", role_names=["student", "beadle"])
    assert login(student).get(reverse("supervision:dashboard")).status_code == 403


def test_member_with_two_supervisor_roles_is_denied(login, make_member):
    member = make_member("two@example.com", role_names=["supervisor_5", "supervisor_4"])
    response = login(member).get(reverse("supervision:dashboard"))
    assert response.status_code == 403
    assert b"more than one form" in response.content


def test_supervisor_toggles_beadle_in_scope_only(login, make_member):
    supervisor = make_member("sup@example.com", role_names=["supervisor_5"])
    inside = make_member("in@example.com", form_class="5-2")
    outside = make_member("out@example.com", form_class="4-2")
    client = login(supervisor)

    client.post(reverse("supervision:toggle_beadle", args=[inside.pk]))
    assert get_member_role_names(inside) == ["student", "beadle"]
    client.post(reverse("supervision:toggle_beadle", args=[inside.pk]))
    assert get_member_role_names(inside) == ["student"]

    response = client.post(reverse("supervision:toggle_beadle", args=[outside.pk]))
    assert response.status_code == 404
    assert get_member_role_names(outside) == ["student"]


def test_supervisor_bulk_update_skips_other_forms(login, make_member):
    supervisor = make_member("sup@example.com", role_names=["supervisor_5"])
    a = make_member("a@example.com", form_class="5-2")
    b = make_member("b@example.com", form_class="5-3")
    outside = make_member("out@example.com", form_class="4-2")
    response = login(supervisor).post(
        reverse("supervision:bulk_update"),
        {"role": "beadle", "member_ids": [a.pk, b.pk, outside.pk]},
    )
    assert response.status_code == 302
    assert "beadle" in get_member_role_names(a)
    assert "beadle" in get_member_role_names(b)
    assert "beadle" not in get_member_role_names(outside)


def test_supervisor_bulk_update_rejects_other_roles(login, make_member):
    supervisor = make_member("sup@example.com", role_names=["supervisor_5"])
    a = make_member("a@example.com", form_class="5-2")
    response = login(supervisor).post(reverse("supervision:bulk_update"), {"role": "admin", "member_ids": [a.pk]})
    assert response.status_code == 400


def test_supervisor_updates_form_class(login, make_member):
    supervisor = make_member("sup@example.com", role_names=["supervisor_5"])
    member = make_member("a@example.com", form_class="5-2")
    client = login(supervisor)
    client.post(reverse("supervision:update_form_class", args=[member.pk]), {"form_class": "5-4"})
    member.refresh_from_db()
    assert member.form_class == "5-4"

    client.post(reverse("supervision:update_form_class", args=[member.pk]), {"form_class": "X-1"})
    member.refresh_from_db()
    assert member.form_class == "5-4"


def test_users_list_api_requires_role_manager(login, make_member):
    student = make_member("s@example.com")
    response = login(student).get(reverse("supervision:api_users_list"))
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Not authorized"}


def test_users_list_api(login, make_member):
    tech = make_member("tech@example.com", full_name="Tech", role_names=["tech_team"])
    make_member("s@example.com", full_name="Student")
    data = login(tech).get(reverse("supervision:api_users_list")).json()
    assert data["success"] is True
    assert {u["email"] for u in data["users"]} == {"tech@example.com", "s@example.com"}


def test_update_roles_api(login, make_member):
    tech = make_member("tech@example.com", role_names=["tech_team"])
    member = make_member("s@example.com")
    client = login(tech)
    url = reverse("supervision:api_update_roles")

    response = post_json(client, url, {"userId": member.pk, "roles": ["beadle", "supervisor_5"]})
    assert response.status_code == 200
    assert response.json()["user"]["roles"] == ["beadle", "supervisor_5"]

    response = post_json(client, url, {"userId": member.pk, "roles": ["wizard"]})
    assert response.status_code == 400
    assert get_member_role_names(member) == ["beadle", "supervisor_5"]

    assert post_json(client, url, {"userId": member.pk}).status_code == 400
    assert post_json(client, url, {"userId": 999999, "roles": []}).status_code == 404


def test_role_management_page(login, make_member):
    admin = make_member("admin@example.com", role_names=["super_admin"])
    member = make_member("s@example.com")
    client = login(admin)
    assert client.get(reverse("supervision:role_management")).status_code == 200
    client.post(reverse("supervision:role_management"), {"member_id": member.pk, "roles": ["admin"]})
    assert get_member_role_names(member) == ["admin"]


def test_email_reports_api_generate(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    _slip(absent_students=["A", "B"], students_present=30)
    response = post_json(login(admin), reverse("mailer:api_email_reports"), {"action": "generate", "date": "2025-01-10"})
    assert response.status_code == 200
    reports = response.json()["reports"]
    assert list(reports) == ["1st Form", "2nd Form", "3rd Form", "4th Form", "5th Form", "6A", "6B"]
    assert reports["5th Form"]["hasData"] is True
    assert "Students absent: 2" in reports["5th Form"]["textContent"]
    assert reports["6B"]["hasData"] is False
    assert "NO SUBMISSIONS" in reports["6B"]["textContent"]


@pytest.mark.parametrize(
    "payload,error",
    [
        ({"action": "generate"}, "Date is required"),
        ({"action": "generate", "date": "10/01/2025"}, "Invalid date '10/01/2025', expected YYYY-MM-DD"),
        ({"action": "send-everything"}, "Invalid action"),
    ],
)
def test_email_reports_api_rejects_bad_requests(login, make_member, payload, error):
    admin = make_member("admin@example.com", role_names=["admin"])
    response = post_json(login(admin), reverse("mailer:api_email_reports"), payload)
    assert response.status_code == 400
    assert response.json() == {"error": error}


def test_email_reports_api_rejects_non_object_body(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    response = login(admin).post(reverse("mailer:api_email_reports"), data="[1]", content_type="application/json")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON"}


@pytest.mark.parametrize("url_name", ["accounts:api_profile_update", "accounts:api_change_password"])
def test_profile_api_rejects_non_object_body(login, make_member, url_name):
    member = make_member("a@example.com", full_name="Ann Lee")
    response = login(member).post(reverse(url_name), data="[1]", content_type="application/json")
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid JSON"}


def test_email_reports_api_summary_of_empty_store(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    data = login(admin).get(reverse("mailer:api_email_reports")).json()
    assert data == {"totalSlips": 0, "formLevels": [], "dates": [], "sampleSlip": None}


def test_slip_store_summary_queries_the_database_not_every_row(django_assert_num_queries):
    for n in range(5):
        _slip(class_name=f"5-{n + 1}", date=date(2025, 1, 6 + n % 2))
    latest = _slip(grade_level="6B", class_name="6B-1")
    with django_assert_num_queries(4):
        summary = slip_store_summary()
    assert summary["totalSlips"] == 6
    assert summary["formLevels"] == ["5th Form", "6B"]
    assert summary["dates"] == ["2025-01-10", "2025-01-07", "2025-01-06"]
    assert summary["sampleSlip"]["id"] == latest.id


def test_email_reports_api_scheduled_uses_today(login, make_member, monkeypatch):
    from django.utils import timezone

    monkeypatch.setattr(timezone, "localdate", lambda: date(2025, 1, 10))
    admin = make_member("admin@example.com", role_names=["admin"])
    _slip()
    response = post_json(login(admin), reverse("mailer:api_email_reports"), {"action": "scheduled"})
    assert response.status_code == 200
    assert response.json()["reports"]["5th Form"]["date"] == "2025-01-10"


def test_email_reports_api_summary(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    _slip()
    _slip(grade_level="6A", class_name="6A-1", date=date(2025, 1, 9))
    data = login(admin).get(reverse("mailer:api_email_reports")).json()
    assert data["totalSlips"] == 2
    assert sorted(data["formLevels"]) == ["5th Form", "6A"]
    assert sorted(data["dates"]) == ["2025-01-09", "2025-01-10"]
    assert data["sampleSlip"]["class_name"] in {"5-2", "6A-1"}


def test_email_reports_page(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    response = login(admin).get(reverse("mailer:email_reports"), {"date": "2025-01-10"})
    assert response.status_code == 200
    assert len(response.context["reports"]) == 7


def test_profile_api_update_and_password(login, make_member):
    member = make_member("a@example.com", full_name="Ann Lee", password="oldpass1")
    client = login(member)

    response = post_json(client, reverse("accounts:api_profile_update"), {"full_name": "Ann B. Lee", "form_class": "5-2"})
    assert response.status_code == 200
    member.refresh_from_db()
    assert member.full_name == "Ann B. Lee"
    assert member.form_level == "5th Form"

    response = post_json(client, reverse("accounts:api_profile_update"), {"full_name": "  "})
    assert response.status_code == 400

    url = reverse("accounts:api_change_password")
    assert post_json(client, url, {"currentPassword": "wrong", "newPassword": "newpass1"}).status_code == 400
    assert post_json(client, url, {"currentPassword": "oldpass1", "newPassword": "abc"}).status_code == 400
    assert post_json(client, url, {"currentPassword": "oldpass1", "newPassword": "newpass1"}).status_code == 200
    member.refresh_from_db()
    assert member.check_password("newpass1")

    profile = client.get(reverse("accounts:api_profile")).json()
    assert profile["user"]["email"] == "a@example.com"


def test_admin_manages_announcements(login, make_member):
    admin = make_member("admin@example.com", role_names=["admin"])
    client = login(admin)
    client.post(reverse("content:create_announcement"), {"title": "Exams", "priority": "high", "content": "Monday"})
    ann = Announcement.objects.get()
    assert ann.created_by == admin
    client.post(reverse("content:delete_announcement", args=[ann.pk]))
    assert not Announcement.objects.exists()


def test_students_cannot_post_announcements(login, make_member):
    student = make_member("s@example.com")
    response = login(student).post(
        reverse("content:create_announcement"), {"title": "Hi", "priority": "low", "content": "x"}
    )
    assert response.status_code == 403
    assert not Announcement.objects.exists()
