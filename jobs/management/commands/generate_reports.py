from django.core.management.base import BaseCommand, CommandError

from jobs.reports import ReportDateError, build_supervisor_reports


class Command(BaseCommand):
    help = "Print the daily supervisor reports for a date (default: today)"

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Report date as YYYY-MM-DD")
        parser.add_argument("--form", action="append", dest="forms", help="Only this form (repeatable)")

    def handle(self, *args, **options):
        try:
            reports = build_supervisor_reports(options.get("date"), forms=options.get("forms"))
        except ReportDateError as exc:
            raise CommandError(str(exc))
        for report in reports.values():
            self.stdout.write(
                self.style.MIGRATE_HEADING(
                    f"{report['form_level']} -> {report['supervisor_name']} <{report['supervisor_email']}>"
                )
            )
            self.stdout.write(report["text"])
