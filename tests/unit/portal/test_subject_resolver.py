"""
Unit tests for subject resolution.

@testCovers portal_app/lib/permissions/subject_resolver.py
"""

import unittest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from pydantic import ValidationError

from portal_app.lib.models.models_access import Role, Subject, UserRecord
from portal_app.lib.permissions.errors import Unauthenticated
from portal_app.lib.permissions.subject_resolver import (
    parse_role,
    record_departments,
    resolve_subject,
)


class TestParseRole(unittest.TestCase):
    """Test role parsing and aliases."""

    def test_canonical_roles(self):
        self.assertEqual(parse_role('admin'), Role.ADMIN)
        self.assertEqual(parse_role('pm'), Role.PM)
        self.assertEqual(parse_role('general'), Role.GENERAL)

    def test_case_insensitive(self):
        self.assertEqual(parse_role(' Admin '), Role.ADMIN)
        self.assertEqual(parse_role('PM'), Role.PM)

    def test_manager_alias_maps_to_pm(self):
        self.assertEqual(parse_role('pr_manager'), Role.PM)

    def test_directory_default_user_maps_to_general(self):
        self.assertEqual(parse_role('user'), Role.GENERAL)

    def test_missing_or_unknown_role_is_general(self):
        self.assertEqual(parse_role(None), Role.GENERAL)
        self.assertEqual(parse_role(''), Role.GENERAL)
        with self.assertLogs('portal_app.lib.permissions.subject_resolver', level='WARNING'):
            self.assertEqual(parse_role('superuser'), Role.GENERAL)

    def test_role_ranks_are_ordered(self):
        self.assertGreater(Role.ADMIN.rank, Role.PM.rank)
        self.assertGreater(Role.PM.rank, Role.GENERAL.rank)


class TestResolveSubject(unittest.TestCase):
    """Test building subjects from user records."""

    def test_resolves_role_and_departments(self):
        subject = resolve_subject('u1', {'id': 'u1', 'role': 'pm', 'departments': ['Eng', 'Ops']})
        self.assertEqual(subject.id, 'u1')
        self.assertEqual(subject.role, Role.PM)
        self.assertEqual(subject.departments, frozenset({'Eng', 'Ops'}))

    def test_accepts_user_record_model(self):
        record = UserRecord(id='u1', role='admin', departments='HR, Finance')
        subject = resolve_subject('u1', record)
        self.assertEqual(subject.role, Role.ADMIN)
        self.assertEqual(subject.departments, frozenset({'HR', 'Finance'}))

    def test_legacy_single_department(self):
        subject = resolve_subject('u1', {'id': 'u1', 'department': 'Marketing'})
        self.assertEqual(subject.departments, frozenset({'Marketing'}))

    def test_empty_departments_get_default(self):
        subject = resolve_subject('u1', {'id': 'u1', 'departments': []}, default_department='General')
        self.assertEqual(subject.departments, frozenset({'General'}))

    def test_default_department_comes_from_settings(self):
        subject = resolve_subject('u1', {'id': 'u1'})
        self.assertEqual(len(subject.departments), 1)

    def test_case_duplicates_collapse(self):
        subject = resolve_subject('u1', {'id': 'u1', 'departments': ['Eng', 'ENG', 'eng ']})
        self.assertEqual(subject.departments, frozenset({'Eng'}))

    def test_missing_identity_is_unauthenticated(self):
        with self.assertRaises(Unauthenticated) as ctx:
            resolve_subject(None, {'id': 'u1'})
        self.assertEqual(ctx.exception.status_code, 401)

    def test_missing_record_is_unauthenticated(self):
        with self.assertRaises(Unauthenticated):
            resolve_subject('u1', None)

    def test_mismatched_record_is_unauthenticated(self):
        with self.assertRaises(Unauthenticated):
            resolve_subject('u1', {'id': 'u2', 'role': 'admin'})

    def test_subject_is_immutable(self):
        subject = resolve_subject('u1', {'id': 'u1', 'role': 'general', 'departments': ['Eng']})
        with self.assertRaises(ValidationError):
            subject.role = Role.ADMIN

    def test_subject_requires_departments(self):
        with self.assertRaises(ValidationError):
            Subject(id='u1', role=Role.GENERAL, departments=frozenset())


class TestRecordDepartments(unittest.TestCase):
    """Test reading departments from stored records."""

    def test_list_preferred_over_legacy_field(self):
        record = UserRecord(id='u1', departments=['Eng'], department='HR')
        self.assertEqual(record_departments(record, 'General'), ['Eng'])

    def test_blank_entries_fall_back_to_default(self):
        record = UserRecord(id='u1', departments=['  ', ''])
        self.assertEqual(record_departments(record, 'General'), ['General'])


if __name__ == '__main__':
    unittest.main()
