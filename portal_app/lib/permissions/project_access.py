"""
Project access control.

Project managers get management rights over a project only if their
department set covers every department of the project. Assignment
eligibility, on the other hand, only needs one shared department. The two
predicates are kept separate.
"""

from typing import Iterable, List

from ..models.models_access import Assignment, Project, ProjectCapabilities, Role, Subject
from ..utils.logging_utils import get_logger
from .department_utils import departments_cover, departments_outside, departments_overlap
from .errors import Forbidden, InvalidOperation

logger = get_logger(__name__)


def is_project_owner(subject: Subject, project: Project) -> bool:
    return subject.id == project.owner_id


def is_assigned(subject: Subject, project: Project) -> bool:
    """True if the subject has an assignment on the project."""
    return any(assignment.user_id == subject.id for assignment in project.assignments)


def pm_has_access(subject: Subject, project: Project) -> bool:
    """
    True if the subject is a project manager covering all project departments.

    Partial coverage is not enough: a pm of {Eng} has no rights over a
    project in {Eng, Ops}.
    """
    return subject.role == Role.PM and departments_cover(subject.departments, project.departments)


def can_view_project(subject: Subject, project: Project) -> bool:
    return (
        subject.is_admin
        or pm_has_access(subject, project)
        or is_assigned(subject, project)
        or is_project_owner(subject, project)
    )


def can_edit_project(subject: Subject, project: Project) -> bool:
    return subject.is_admin or is_project_owner(subject, project) or pm_has_access(subject, project)


def can_delete_project(subject: Subject, project: Project) -> bool:
    # Ownership alone does not allow deletion
    return subject.is_admin or pm_has_access(subject, project)


def evaluate_project(subject: Subject, project: Project) -> ProjectCapabilities:
    """
    Evaluate all project capabilities for a subject.

    Args:
        subject: Current subject
        project: Freshly loaded project snapshot

    Returns:
        ProjectCapabilities
    """
    can_edit = can_edit_project(subject, project)
    capabilities = ProjectCapabilities(
        can_view=can_view_project(subject, project),
        can_edit=can_edit,
        can_delete=can_delete_project(subject, project),
        can_manage_assignments=can_edit
    )
    logger.debug(f"Project {project.id} for {subject.id}: {capabilities}")
    return capabilities


def assignment_allowed(user_departments: Iterable[str], project_departments: Iterable[str]) -> bool:
    """True if a user with these departments may be assigned to the project."""
    return departments_overlap(user_departments, project_departments)


def can_create_project(subject: Subject, departments: Iterable[str]) -> bool:
    """
    Check if subject may create a project in the given departments.

    Admins may create anywhere, project managers only inside their own
    departments, everybody else never.
    """
    departments = list(departments)
    if subject.is_admin:
        return True
    if subject.role != Role.PM:
        return False
    return not departments_outside(subject.departments, departments)


def validate_department_change(subject: Subject, requested: Iterable[str]) -> List[str]:
    """
    Validate a requested project department set for the subject.

    Project managers may only assign their own departments; anything outside
    is rejected, never silently dropped.

    Args:
        subject: Current subject
        requested: Normalized requested departments

    Returns:
        The requested departments, unchanged

    Raises:
        InvalidOperation: If no department is requested
        Forbidden: If a pm requests a department outside their own set
    """
    requested = list(requested)
    if not requested:
        raise InvalidOperation("At least one department is required.")

    if subject.role == Role.PM:
        outside = departments_outside(subject.departments, requested)
        if outside:
            raise Forbidden(
                f"PMs can only use their own departments (not: {', '.join(outside)})."
            )
    return requested


def visible_assignments(subject: Subject, project: Project) -> List[Assignment]:
    """
    Return the assignments the subject may see.

    Admins, owners and project managers with access see every assignment;
    anyone else only sees their own.
    """
    if subject.is_admin or is_project_owner(subject, project) or pm_has_access(subject, project):
        return list(project.assignments)
    return [assignment for assignment in project.assignments if assignment.user_id == subject.id]


# Guards

def require_project_view(subject: Subject, project: Project) -> None:
    if not can_view_project(subject, project):
        raise Forbidden("Forbidden.")


def require_project_edit(subject: Subject, project: Project) -> None:
    if not can_edit_project(subject, project):
        raise Forbidden("Forbidden.")


def require_project_delete(subject: Subject, project: Project) -> None:
    if not can_delete_project(subject, project):
        raise Forbidden("Forbidden.")


def require_manage_assignments(subject: Subject, project: Project) -> None:
    if not evaluate_project(subject, project).can_manage_assignments:
        raise Forbidden("Forbidden.")


def require_project_creator(subject: Subject) -> None:
    """Raise Forbidden unless the subject's role may create projects at all."""
    if not (subject.is_admin or subject.is_pm):
        raise Forbidden("Forbidden.")


def require_project_create(subject: Subject, departments: Iterable[str]) -> None:
    """Raise Forbidden unless the subject may create a project in these departments."""
    require_project_creator(subject)
    if not can_create_project(subject, departments):
        raise Forbidden("PMs can only create projects in their departments.")


class ProjectAccessFilter:
    """Filters project lists based on subject access."""

    @staticmethod
    def filter_projects_by_access(projects: Iterable[Project], subject: Subject) -> List[Project]:
        """
        Filter project list based on subject access.

        Args:
            projects: Project snapshots
            subject: Current subject

        Returns:
            Projects the subject can view, in input order
        """
        return [project for project in projects if can_view_project(subject, project)]
