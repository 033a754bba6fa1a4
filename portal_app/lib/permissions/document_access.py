"""
Document access control.

Visibility is decided by, in order:
- private flag: only the uploader, no exception for admins
- hierarchy level 0: admins only
- hierarchy level 1: admins and project managers
- hierarchy level 2: admins, members of an allow-listed department, or any
  non-general role when the allow-list is empty
- hierarchy level 3: everyone

Publishing is gated separately: only admins publish at level 0, only admins
and project managers at level 1.
"""

from typing import Iterable, List, Optional

from ..models.models_access import Document, DocumentCapabilities, Role, Subject
from ..utils.logging_utils import get_logger
from .department_utils import departments_overlap
from .errors import Forbidden

logger = get_logger(__name__)

# Department token that never grants level-2 access on its own
ADMIN_DEPARTMENT_TOKEN = 'admin'


def _is_manager(subject: Subject) -> bool:
    # pm or any role ranked above it
    return subject.role.rank >= Role.PM.rank


def _can_view_level_2(subject: Subject, document: Document) -> bool:
    if subject.is_admin:
        return True

    if document.access_roles:
        return departments_overlap(
            document.access_roles,
            subject.departments,
            ignore=(ADMIN_DEPARTMENT_TOKEN,)
        )

    # No allow-list: any non-general role
    return subject.role != Role.GENERAL


def can_view_document(subject: Subject, document: Document) -> bool:
    """
    Check if subject can view (and download) a document.

    Args:
        subject: Current subject
        document: Document snapshot

    Returns:
        True if the document is visible to the subject
    """
    if document.is_private:
        return subject.id == document.owner_id

    level = document.hierarchy_level if document.hierarchy_level is not None else 3

    if level == 0:
        return subject.is_admin
    if level == 1:
        return _is_manager(subject)
    if level == 2:
        return _can_view_level_2(subject, document)
    return True


def can_publish_at_level(subject: Subject, level: Optional[int], is_private: bool = False) -> bool:
    """
    Check if subject may upload a document at the given hierarchy level.

    Args:
        subject: Current subject
        level: Requested hierarchy level (None means the default, 3)
        is_private: Private uploads ignore the level

    Returns:
        True if the subject may publish at that level
    """
    if is_private or level is None:
        return True
    if level == 0:
        return subject.is_admin
    if level == 1:
        return _is_manager(subject)
    return True


def evaluate_document(subject: Subject, document: Document) -> DocumentCapabilities:
    """
    Evaluate all document capabilities for a subject.

    ``can_publish_at_requested_level`` is evaluated for the document's own
    level, i.e. the document is treated as the candidate upload.
    """
    can_view = can_view_document(subject, document)
    capabilities = DocumentCapabilities(
        can_view=can_view,
        can_download=can_view,
        can_publish_at_requested_level=can_publish_at_level(
            subject, document.hierarchy_level, document.is_private
        )
    )
    logger.debug(f"Document {document.id} for {subject.id}: {capabilities}")
    return capabilities


def require_document_view(subject: Subject, document: Document) -> None:
    """Raise Forbidden unless the subject can view the document."""
    if not can_view_document(subject, document):
        raise Forbidden("Forbidden.")


def require_publish_level(subject: Subject, level: Optional[int], is_private: bool = False) -> None:
    """Raise Forbidden unless the subject may publish at the requested level."""
    if can_publish_at_level(subject, level, is_private):
        return
    if level == 0:
        raise Forbidden("Only admins can upload to level 0.")
    raise Forbidden("Only admins and project managers can upload to level 1.")


class DocumentAccessFilter:
    """Filters document lists based on subject access."""

    @staticmethod
    def filter_documents_by_access(documents: Iterable[Document], subject: Subject) -> List[Document]:
        """
        Filter document list based on subject access.

        Args:
            documents: Document snapshots
            subject: Current subject

        Returns:
            Filtered list containing only visible documents, in input order
        """
        return [doc for doc in documents if can_view_document(subject, doc)]
