"""
Access-control decision engine.

One evaluator per resource type, all pure functions of (Subject, Resource):
evaluate_document, evaluate_project, evaluate_instruction,
evaluate_announcement.
"""

from portal_app.lib.permissions.errors import (
    AccessControlError,
    Unauthenticated,
    Forbidden,
    InvalidOperation,
    ResourceNotFound,
)
from portal_app.lib.permissions.subject_resolver import resolve_subject, parse_role
from portal_app.lib.permissions.document_access import (
    evaluate_document,
    can_publish_at_level,
    DocumentAccessFilter,
)
from portal_app.lib.permissions.project_access import (
    evaluate_project,
    pm_has_access,
    visible_assignments,
    ProjectAccessFilter,
)
from portal_app.lib.permissions.instruction_access import evaluate_instruction
from portal_app.lib.permissions.announcement_access import (
    evaluate_announcement,
    AnnouncementAccessFilter,
)

__all__ = [
    "AccessControlError",
    "Unauthenticated",
    "Forbidden",
    "InvalidOperation",
    "ResourceNotFound",
    "resolve_subject",
    "parse_role",
    "evaluate_document",
    "can_publish_at_level",
    "DocumentAccessFilter",
    "evaluate_project",
    "pm_has_access",
    "visible_assignments",
    "ProjectAccessFilter",
    "evaluate_instruction",
    "evaluate_announcement",
    "AnnouncementAccessFilter",
]
