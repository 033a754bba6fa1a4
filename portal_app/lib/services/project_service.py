"""
Project mutations applied to project snapshots.

Covers department changes and assignment resolution. Two mutation paths
react differently to a department mismatch:
- a project manager requesting a department outside their own set is
  rejected with Forbidden
- an assignee without any department in common with the project is
  silently dropped from the assignment list
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from ..models.models_access import Assignment, AssignmentRequest, Project, Subject, UserRecord
from ..permissions.department_utils import normalize_departments, resolve_departments
from ..permissions.errors import InvalidOperation
from ..permissions.project_access import (
    assignment_allowed,
    require_manage_assignments,
    require_project_create,
    require_project_creator,
    require_project_edit,
    require_project_view,
    validate_department_change,
    visible_assignments,
)
from ..permissions.subject_resolver import record_departments
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

UserLookup = Callable[[str], Union[UserRecord, Mapping[str, Any], None]]
AssignmentCandidate = Union[AssignmentRequest, Assignment, Mapping[str, Any], str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def prepare_departments(
    subject: Subject,
    value: Union[str, Iterable[str], None],
    catalog: Optional[Iterable[str]] = None
) -> list[str]:
    """
    Normalize and validate a requested project department set.

    Args:
        subject: Current subject
        value: List of names or comma-separated string
        catalog: Known departments; when given, names are mapped onto the
            catalog spelling and unknown names are rejected

    Returns:
        Department names to store on the project

    Raises:
        Forbidden: A project manager requested a department outside their set
        InvalidOperation: No departments, or unknown departments
    """
    from portal_app.config import get_settings

    departments = normalize_departments(value, limit=get_settings().max_project_departments)
    if not departments:
        raise InvalidOperation("At least one department is required.")

    departments = validate_department_change(subject, departments)

    if catalog is not None:
        departments = resolve_departments(departments, catalog)
    return departments


def _as_request(candidate: AssignmentCandidate) -> Optional[AssignmentRequest]:
    if isinstance(candidate, AssignmentRequest):
        return candidate
    if isinstance(candidate, Assignment):
        return AssignmentRequest(user_id=candidate.user_id, instructions=candidate.instructions)
    if isinstance(candidate, str):
        return AssignmentRequest(user_id=candidate) if candidate else None
    user_id = candidate.get('user_id') or candidate.get('userId')
    if not user_id:
        return None
    return AssignmentRequest(user_id=user_id, instructions=candidate.get('instructions') or [])


def resolve_assignments(
    candidates: Iterable[AssignmentCandidate],
    project_departments: Iterable[str],
    user_lookup: UserLookup,
    existing: Iterable[Assignment] = ()
) -> list[Assignment]:
    """
    Turn requested assignments into stored assignments.

    Candidates without a known user, and users without any department in
    common with the project, are dropped without error. One assignment per
    user: a repeated user replaces the earlier entry in place. Instructions
    of an existing assignment are kept unless the candidate brings its own.

    Args:
        candidates: Requested assignments (requests, stored assignments, mappings
            or user ids)
        project_departments: Departments of the project after the update
        user_lookup: Returns the stored user record for an id, or None
        existing: Current assignments of the project

    Returns:
        Ordered list of assignments
    """
    project_departments = list(project_departments)
    existing_by_user = {assignment.user_id: assignment for assignment in existing}
    resolved: dict[str, Assignment] = {}

    for candidate in candidates:
        request = _as_request(candidate)
        if request is None:
            continue

        record = user_lookup(request.user_id)
        if record is None:
            logger.info(f"Dropping assignment for unknown user {request.user_id}")
            continue
        if not isinstance(record, UserRecord):
            record = UserRecord.model_validate(dict(record))

        user_departments = record_departments(record)
        if not assignment_allowed(user_departments, project_departments):
            logger.info(
                f"Dropping assignment for {request.user_id}: no department overlap "
                f"({user_departments} vs {project_departments})"
            )
            continue

        instructions = request.instructions
        if not instructions and request.user_id in existing_by_user:
            instructions = existing_by_user[request.user_id].instructions

        resolved[request.user_id] = Assignment(
            user_id=request.user_id,
            departments=user_departments,
            name=record.name or record.email or "User",
            email=record.email,
            instructions=list(instructions)
        )

    return list(resolved.values())


def create_project(
    subject: Subject,
    project_id: str,
    title: str,
    departments: Union[str, Iterable[str], None],
    assignments: Iterable[AssignmentCandidate] = (),
    user_lookup: Optional[UserLookup] = None,
    catalog: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None
) -> Project:
    """
    Build a new project owned by the subject.

    Raises:
        InvalidOperation: Missing title, no departments, unknown departments
        Forbidden: Subject may not create projects in these departments
    """
    require_project_creator(subject)

    title = (title or "").strip()
    if not title:
        raise InvalidOperation("Title is required.")

    resolved_departments = prepare_departments(subject, departments, catalog)
    require_project_create(subject, resolved_departments)

    assignments = list(assignments)
    resolved_assignments = []
    if assignments:
        if user_lookup is None:
            raise InvalidOperation("A user lookup is required to resolve assignments.")
        resolved_assignments = resolve_assignments(assignments, resolved_departments, user_lookup)

    project = Project(
        id=project_id,
        owner_id=subject.id,
        title=title,
        departments=resolved_departments,
        assignments=resolved_assignments,
        updated_at=now or _utcnow()
    )
    logger.info(f"Project {project_id} created by {subject.id} in {resolved_departments}")
    return project


def update_project(
    subject: Subject,
    project: Project,
    title: Optional[str] = None,
    departments: Union[str, Iterable[str], None] = None,
    assignments: Optional[Iterable[AssignmentCandidate]] = None,
    user_lookup: Optional[UserLookup] = None,
    catalog: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None
) -> Project:
    """
    Apply an edit to a project snapshot.

    When the department set changes, assignments are re-checked against the
    new set; assignments that no longer share a department are dropped.

    Raises:
        InvalidOperation: Nothing to update, empty title, invalid departments
        Forbidden: Subject may not edit, or a pm used foreign departments
    """
    require_project_edit(subject, project)

    update: dict[str, Any] = {}

    if title is not None:
        title = title.strip()
        if not title:
            raise InvalidOperation("Title is required.")
        update['title'] = title

    new_departments = None
    if departments is not None:
        new_departments = prepare_departments(subject, departments, catalog)
        update['departments'] = new_departments

    target_departments = new_departments if new_departments is not None else project.departments

    if assignments is not None:
        require_manage_assignments(subject, project)
        if user_lookup is None:
            raise InvalidOperation("A user lookup is required to resolve assignments.")
        update['assignments'] = resolve_assignments(
            assignments, target_departments, user_lookup, existing=project.assignments
        )
    elif new_departments is not None:
        kept = [
            assignment for assignment in project.assignments
            if assignment_allowed(assignment.departments, new_departments)
        ]
        if len(kept) != len(project.assignments):
            logger.info(
                f"Project {project.id}: dropped {len(project.assignments) - len(kept)} "
                f"assignment(s) after department change"
            )
        update['assignments'] = kept

    if not update:
        raise InvalidOperation("Nothing to update.")

    update['updated_at'] = now or _utcnow()
    return project.model_copy(update=update)


def project_for_subject(subject: Subject, project: Project) -> Project:
    """
    Return the project as the subject may see it.

    Raises:
        Forbidden: Subject cannot view the project
    """
    require_project_view(subject, project)
    return project.model_copy(update={'assignments': visible_assignments(subject, project)})
