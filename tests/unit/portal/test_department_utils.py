"""
Unit tests for department-set primitives.

@testCovers portal_app/lib/permissions/department_utils.py
"""

import unittest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from portal_app.lib.permissions.department_utils import (
    department_key,
    department_keys,
    normalize_departments,
    departments_overlap,
    departments_cover,
    departments_outside,
    resolve_departments,
)
from portal_app.lib.permissions.errors import InvalidOperation


class TestNormalizeDepartments(unittest.TestCase):
    """Test normalization of raw department input."""

    def test_none_yields_empty_list(self):
        self.assertEqual(normalize_departments(None), [])

    def test_comma_separated_string(self):
        self.assertEqual(
            normalize_departments(" Engineering, HR ,, Finance"),
            ["Engineering", "HR", "Finance"]
        )

    def test_case_insensitive_duplicates_keep_first_spelling(self):
        self.assertEqual(
            normalize_departments(["Engineering", "engineering ", "HR", "ENGINEERING"]),
            ["Engineering", "HR"]
        )

    def test_non_string_entries_are_dropped(self):
        self.assertEqual(normalize_departments(["Ops", None, 3, ""]), ["Ops"])

    def test_limit_applies_to_non_empty_entries(self):
        value = ["A", "", "B", "C", "D"]
        self.assertEqual(normalize_departments(value, limit=3), ["A", "B", "C"])


class TestSetPredicates(unittest.TestCase):
    """Test overlap and coverage predicates."""

    def test_key_is_trimmed_and_casefolded(self):
        self.assertEqual(department_key("  Engineering "), "engineering")
        self.assertEqual(department_keys(["Ops", "OPS", " "]), frozenset({"ops"}))

    def test_overlap_is_case_insensitive(self):
        self.assertTrue(departments_overlap(["Eng"], ["eng", "Ops"]))
        self.assertFalse(departments_overlap(["Eng"], ["Ops"]))

    def test_overlap_ignores_given_tokens(self):
        self.assertFalse(departments_overlap(["admin"], ["Admin"], ignore=["admin"]))
        self.assertTrue(departments_overlap(["admin", "HR"], ["ADMIN", "hr"], ignore=["admin"]))

    def test_overlap_with_empty_set(self):
        self.assertFalse(departments_overlap([], ["Eng"]))

    def test_cover_requires_every_department(self):
        self.assertTrue(departments_cover(["A", "B"], ["a", "b"]))
        self.assertTrue(departments_cover(["A", "B", "C"], ["A"]))
        self.assertFalse(departments_cover(["A", "B"], ["A", "C"]))

    def test_empty_requirement_is_never_covered(self):
        self.assertFalse(departments_cover(["A"], []))

    def test_outside_preserves_requested_spelling(self):
        self.assertEqual(departments_outside(["Eng"], ["eng", "Ops", "HR"]), ["Ops", "HR"])


class TestResolveDepartments(unittest.TestCase):
    """Test mapping onto the department catalog."""

    CATALOG = ["General", "HR", "Engineering", "Finance", "Marketing", "Operations"]

    def test_maps_onto_catalog_spelling(self):
        self.assertEqual(
            resolve_departments(["engineering", "hr"], self.CATALOG),
            ["Engineering", "HR"]
        )

    def test_unknown_department_raises(self):
        with self.assertRaises(InvalidOperation) as ctx:
            resolve_departments(["Engineering", "Legal"], self.CATALOG)
        self.assertIn("Legal", str(ctx.exception))
        self.assertEqual(ctx.exception.status_code, 400)


if __name__ == '__main__':
    unittest.main()
