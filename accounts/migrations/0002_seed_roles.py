from django.db import migrations

ROLES = [
    # (role_name, display_name, role_type, permission_level)
    ("student", "Student", "primary", 1),
    ("beadle", "Beadle", "sub", 2),
    ("supervisor_1", "Form 1 Supervisor", "sub", 3),
    ("supervisor_2", "Form 2 Supervisor", "sub", 3),
    ("supervisor_3", "Form 3 Supervisor", "sub", 3),
    ("supervisor_4", "Form 4 Supervisor", "sub", 3),
    ("supervisor_5", "Form 5 Supervisor", "sub", 3),
    ("supervisor_6", "Form 6 Supervisor", "sub", 3),
    ("supervisor_6a", "Form 6A Supervisor", "sub", 3),
    ("tech_team", "Tech Team", "primary", 4),
    ("admin", "Administrator", "primary", 4),
    ("super_admin", "Super Administrator", "primary", 5),
]


def forwards(apps, schema_editor):
    Role = apps.get_model("accounts", "Role")
    for role_name, display_name, role_type, level in ROLES:
        Role.objects.update_or_create(
            role_name=role_name,
            defaults={
                "display_name": display_name,
                "role_type": role_type,
                "permission_level": level,
            },
        )


def backwards(apps, schema_editor):
    Role = apps.get_model("accounts", "Role")
    Role.objects.filter(role_name__in=[r[0] for r in ROLES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(forwards, backwards),
    ]
