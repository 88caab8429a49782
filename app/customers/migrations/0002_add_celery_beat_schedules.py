"""
Add the Celery Beat schedule for the monthly ledger rollover.

The rollover runs once a day at LEDGER_ROLLOVER_HOUR:LEDGER_ROLLOVER_MINUTE
(UTC, default 00:01). Disable it by switching the PeriodicTask off in the
admin.
"""

from django.conf import settings
from django.db import migrations

ROLLOVER_TASK_NAME = "Customers: Monthly Ledger Rollover"


def create_periodic_tasks(apps, schema_editor):
    """Create the daily rollover schedule."""
    CrontabSchedule = apps.get_model("django_celery_beat", "CrontabSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    crontab_daily, _ = CrontabSchedule.objects.get_or_create(
        minute=str(getattr(settings, "LEDGER_ROLLOVER_MINUTE", 1)),
        hour=str(getattr(settings, "LEDGER_ROLLOVER_HOUR", 0)),
        day_of_week="*",
        day_of_month="*",
        month_of_year="*",
    )

    PeriodicTask.objects.get_or_create(
        name=ROLLOVER_TASK_NAME,
        defaults={
            "task": "customers.tasks.rollover_monthly_ledgers",
            "crontab": crontab_daily,
            "enabled": True,
            "description": (
                "Opens the current month's ledger row for every active customer "
                "that has none yet. Customers already initialized are skipped."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    """Remove the rollover schedule on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=ROLLOVER_TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("customers", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
