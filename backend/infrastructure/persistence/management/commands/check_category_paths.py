"""
Check Category Paths Command.

Compares stored category paths with the parent links and optionally
rewrites the ones that drifted.
"""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from domain.shared.exceptions import StoreException


class Command(BaseCommand):
    help = 'Verify materialized category paths against the parent links'

    def add_arguments(self, parser):
        parser.add_argument(
            '--repair',
            action='store_true',
            help='Rewrite mismatched paths and labels'
        )

    def handle(self, *args, **options):
        service = apps.get_app_config('persistence').category_service
        try:
            report = service.verify_paths(repair=options['repair'])
        except StoreException as e:
            raise CommandError(e.message) from e

        for issue in report.issues:
            line = f"[{issue.issue_type.value}] {issue.category_id}: {issue.message}"
            if issue.expected_path is not None:
                line += f" (stored '{issue.actual_path}', expected '{issue.expected_path}')"
            self.stdout.write(self.style.WARNING(line))

        summary = (
            f"{report.checked} categories checked, "
            f"{len(report.issues)} issue(s), {report.repaired} repaired"
        )
        if report.is_consistent:
            self.stdout.write(self.style.SUCCESS(summary))
        else:
            self.stdout.write(summary)
