"""
Path integrity check, its Celery task and management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from application.catalog import IssueType
from application.tasks.category_tasks import verify_category_paths
from infrastructure.persistence.models import Category as CategoryModel

pytestmark = pytest.mark.django_db


def corrupt(category, path):
    # Bypass the engine, as a bad import or manual SQL would
    CategoryModel.objects.filter(pk=category.id).update(path=path)


class TestPathIntegrityChecker:

    def test_consistent_tree(self, service, passive_tree):
        report = service.verify_paths()
        assert report.is_consistent
        assert report.checked == 4
        assert report.repaired == 0

    def test_reports_drifted_path(self, service, passive_tree):
        corrupt(passive_tree['0402'], 'resistors.0402')
        report = service.verify_paths()

        assert [issue.issue_type for issue in report.issues] == [IssueType.PATH_MISMATCH]
        issue = report.issues[0]
        assert issue.category_id == passive_tree['0402'].id
        assert issue.actual_path == 'resistors.0402'
        assert issue.expected_path == 'resistors.smd.0402'

    def test_drifted_parent_path_flags_the_parent_only(self, service, passive_tree):
        corrupt(passive_tree['smd'], 'resistors.smt')
        report = service.verify_paths()
        assert [issue.category_id for issue in report.issues] == [passive_tree['smd'].id]

    def test_repair(self, service, repository, passive_tree):
        corrupt(passive_tree['smd'], 'smd')
        corrupt(passive_tree['0402'], 'x.y.z')

        report = service.verify_paths(repair=True)

        assert report.repaired == 2
        assert repository.get_by_id(passive_tree['smd'].id).path == 'resistors.smd'
        assert repository.get_by_id(passive_tree['0402'].id).path == 'resistors.smd.0402'
        assert service.verify_paths().is_consistent

    def test_orphan(self, service, passive_tree):
        # A live child under a deleted parent can only come from outside the engine
        CategoryModel.objects.filter(pk=passive_tree['smd'].id).update(deleted_at=timezone.now())
        report = service.verify_paths()

        assert [issue.issue_type for issue in report.issues] == [IssueType.ORPHAN]
        assert report.issues[0].category_id == passive_tree['0402'].id

    def test_cycle(self, service, passive_tree):
        CategoryModel.objects.filter(pk=passive_tree['resistors'].id).update(parent_id=passive_tree['0402'].id)
        report = service.verify_paths(repair=True)

        assert [issue.issue_type for issue in report.issues] == [IssueType.CYCLE]
        assert report.repaired == 0

    def test_duplicate_label_is_reported_and_not_repaired(self, service, repository, make_category, passive_tree):
        tht = make_category('THT', passive_tree['resistors'])
        # Renamed onto the label of its sibling SMD outside the engine
        CategoryModel.all_objects.filter(pk=tht.id).update(name='smd')

        report = service.verify_paths(repair=True)

        assert [issue.issue_type for issue in report.issues] == [
            IssueType.DUPLICATE_LABEL, IssueType.PATH_MISMATCH,
        ]
        assert {issue.category_id for issue in report.issues} == {tht.id}
        assert report.repaired == 0
        assert repository.get_by_id(tht.id).path == 'resistors.tht'
        assert repository.get_by_id(passive_tree['smd'].id).path == 'resistors.smd'

    def test_report_as_dict(self, service, passive_tree):
        corrupt(passive_tree['0402'], 'wrong')
        data = service.verify_paths().to_dict()
        assert data['is_consistent'] is False
        assert data['issues'][0]['issue_type'] == 'path_mismatch'
        assert data['issues'][0]['category_id'] == str(passive_tree['0402'].id)


class TestMaintenanceEntryPoints:

    def test_celery_task_repairs(self, passive_tree):
        from django.apps import apps

        corrupt(passive_tree['0402'], 'wrong')
        result = verify_category_paths.delay(repair=True).get()

        assert result['repaired'] == 1
        service = apps.get_app_config('persistence').category_service
        assert service.verify_paths().is_consistent

    def test_management_command(self, passive_tree):
        corrupt(passive_tree['smd'], 'smt')
        out = StringIO()
        call_command('check_category_paths', stdout=out)
        output = out.getvalue()

        assert '[path_mismatch]' in output
        assert "expected 'resistors.smd'" in output
        assert '4 categories checked, 1 issue(s), 0 repaired' in output

    def test_management_command_leaves_colliding_rows(self, make_category, passive_tree):
        tht = make_category('THT', passive_tree['resistors'])
        CategoryModel.all_objects.filter(pk=tht.id).update(name='SMD')
        out = StringIO()
        call_command('check_category_paths', '--repair', stdout=out)
        output = out.getvalue()

        assert f'[duplicate_label] {tht.id}' in output
        assert '5 categories checked, 2 issue(s), 0 repaired' in output
        assert CategoryModel.objects.get(pk=tht.id).path == 'resistors.tht'
