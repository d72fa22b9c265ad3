from django.core.management.base import BaseCommand
from django_rq import get_scheduler
from mailer.models import Campaign
from jobs.tasks import kickoff_campaign


class Command(BaseCommand):
    help = "Apply rq-scheduler cron schedules for enabled report campaigns"

    def handle(self, *args, **options):
        scheduler = get_scheduler("default")
        # Clear existing jobs for kickoff to avoid duplicates
        for job in scheduler.get_jobs():
            if job.func_name.endswith("kickoff_campaign"):
                scheduler.cancel(job)
        for c in Campaign.objects.filter(enabled=True):
            # Cron strings are in school time; Django exports TIME_ZONE as TZ.
            scheduler.cron(
                c.schedule_cron,
                func=kickoff_campaign,
                args=[c.id],
                repeat=None,
                queue_name="default",
                use_local_timezone=True,
            )
            self.stdout.write(self.style.SUCCESS(f"Scheduled {c.name} with cron '{c.schedule_cron}'"))
