from django.core.management.base import BaseCommand, CommandError

from accounts.models import User
from accounts.roles import RoleNotFound, add_role_to_member, get_member_roles


class Command(BaseCommand):
    help = "Grant a role to a member (default tech_team) to bootstrap access on a blank database"

    def add_arguments(self, parser):
        parser.add_argument("email", nargs="?")
        parser.add_argument("role", nargs="?", default="tech_team")

    def handle(self, *args, **options):
        email = options.get("email")
        if not email:
            self.stdout.write("Usage: manage.py grant_role <email> [role]")
            self.stdout.write("\nAvailable members:")
            for u in User.objects.order_by("id"):
                self.stdout.write(f"  {u.id}: {u.email} ({u.full_name})")
            return
        user = User.objects.filter(email__iexact=email).first()
        if not user:
            raise CommandError(f"Member with email '{email}' not found")
        self.stdout.write(f"Found member: {user.full_name} ({user.email})")
        try:
            created = add_role_to_member(user, options["role"])
        except RoleNotFound as exc:
            raise CommandError(str(exc))
        if created:
            self.stdout.write(self.style.SUCCESS(f"Added {options['role']} role"))
        else:
            self.stdout.write(f"Member already has the {options['role']} role")
        self.stdout.write("\nCurrent roles:")
        for role in get_member_roles(user):
            self.stdout.write(f"  - {role.display_name} ({role.role_name})")
