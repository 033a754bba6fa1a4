"""
Subject resolution: turns a caller identity plus the stored user record into
the immutable ``Subject`` every evaluator works on.
"""

from typing import Any, Mapping, Optional, Union

from ..models.models_access import Role, Subject, UserRecord
from ..utils.logging_utils import get_logger
from .department_utils import normalize_departments
from .errors import Unauthenticated

logger = get_logger(__name__)


# Stored role names that map onto a canonical role. 'pr_manager' is the
# document-upload spelling of the manager tier; 'user' is the directory default.
ROLE_ALIASES = {
    'admin': Role.ADMIN,
    'pm': Role.PM,
    'pr_manager': Role.PM,
    'general': Role.GENERAL,
    'user': Role.GENERAL,
}


def parse_role(value: Optional[str]) -> Role:
    """
    Parse a stored role name into a canonical role.

    Args:
        value: Stored role name, any casing, or None

    Returns:
        Canonical role; unknown or missing names resolve to general
    """
    if isinstance(value, Role):
        return value
    if not value or not isinstance(value, str):
        return Role.GENERAL

    role = ROLE_ALIASES.get(value.strip().lower())
    if role is None:
        logger.warning(f"Unknown role '{value}', treating as '{Role.GENERAL.value}'")
        return Role.GENERAL
    return role


def record_departments(record: UserRecord, default_department: Optional[str] = None) -> list[str]:
    """
    Read the department list of a stored user record.

    Args:
        record: Stored user record
        default_department: Injected when the record has no departments;
            defaults to the DEFAULT_DEPARTMENT setting

    Returns:
        Non-empty list of department names
    """
    if record.departments:
        departments = normalize_departments(record.departments)
    elif record.department:
        departments = normalize_departments([record.department])
    else:
        departments = []

    if not departments:
        if default_department is None:
            from portal_app.config import get_settings
            default_department = get_settings().default_department
        departments = [default_department]
    return departments


def resolve_subject(
    identity: Optional[str],
    user_record: Union[UserRecord, Mapping[str, Any], None],
    default_department: Optional[str] = None
) -> Subject:
    """
    Build the subject for a request.

    Args:
        identity: Resolved caller id (e.g. the session's user id)
        user_record: Stored record for that id, as model or mapping
        default_department: Department injected when the record has none;
            defaults to the DEFAULT_DEPARTMENT setting

    Returns:
        Immutable Subject

    Raises:
        Unauthenticated: If there is no identity or no user record
    """
    if not identity:
        raise Unauthenticated("Authentication required.")
    if user_record is None:
        raise Unauthenticated(f"Unknown user: {identity}")

    if not isinstance(user_record, UserRecord):
        user_record = UserRecord.model_validate(dict(user_record))

    if user_record.id != identity:
        raise Unauthenticated(f"User record does not match identity: {identity}")

    subject = Subject(
        id=identity,
        role=parse_role(user_record.role),
        departments=frozenset(record_departments(user_record, default_department))
    )
    logger.debug(f"Resolved subject {subject.id}: role={subject.role.value}, departments={sorted(subject.departments)}")
    return subject
