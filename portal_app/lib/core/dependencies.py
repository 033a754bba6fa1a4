"""
FastAPI dependency injection functions.

Provides the user directory and the current subject to route handlers.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header

from ..models.models_access import Subject
from ..permissions.errors import Unauthenticated
from ..permissions.subject_resolver import resolve_subject
from ..repository.user_directory import UserDirectory
from ..utils.logging_utils import get_logger


logger = get_logger(__name__)


class _UserDirectorySingleton:
    """Process-wide default user directory."""
    _instance: Optional[UserDirectory] = None

    @classmethod
    def get_instance(cls) -> UserDirectory:
        if cls._instance is None:
            cls._instance = UserDirectory()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton (for testing)."""
        cls._instance = None


def get_user_directory() -> UserDirectory:
    """Get the user directory (override via app.dependency_overrides)"""
    return _UserDirectorySingleton.get_instance()


def get_current_subject(
    x_user_id: Annotated[Optional[str], Header()] = None,
    directory: UserDirectory = Depends(get_user_directory)
) -> Optional[Subject]:
    """
    Get current subject (returns None if not resolvable).
    Does not raise errors - use for optional authentication.
    """
    if not x_user_id:
        return None
    record = directory.get_user(x_user_id)
    if record is None:
        return None
    return resolve_subject(x_user_id, record)


def require_subject(
    x_user_id: Annotated[Optional[str], Header()] = None,
    directory: UserDirectory = Depends(get_user_directory)
) -> Subject:
    """
    Get current subject (raises Unauthenticated, answered with 401).
    The identity comes from the X-User-Id header set by the session layer.
    """
    if not x_user_id:
        raise Unauthenticated("Authentication required.")

    subject = resolve_subject(x_user_id, directory.get_user(x_user_id))
    logger.debug(f"Request subject: {subject.id} ({subject.role.value})")
    return subject
