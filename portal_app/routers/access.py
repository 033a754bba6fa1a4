"""
Access decision API router.

Exposes the evaluators to the portal front end so it can hide actions the
current user may not take:
- GET /api/v1/access/subject - Resolved subject of the request
- GET /api/v1/access/status - Whether the request carries a known user
- POST /api/v1/access/documents/evaluate - Capabilities for a document
- POST /api/v1/access/projects/evaluate - Capabilities for a project
- POST /api/v1/access/announcements/evaluate - Capabilities for an announcement
"""

from typing import Optional

from fastapi import APIRouter, Depends

from ..lib.core.dependencies import get_current_subject, require_subject
from ..lib.models.models_access import (
    AccessStatusResponse,
    Announcement,
    AnnouncementCapabilities,
    Document,
    DocumentCapabilities,
    Project,
    ProjectCapabilities,
    Subject,
)
from ..lib.permissions.announcement_access import evaluate_announcement
from ..lib.permissions.document_access import evaluate_document
from ..lib.permissions.project_access import evaluate_project
from ..lib.utils.logging_utils import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/access", tags=["access"])


@router.get("/subject", response_model=Subject)
def get_subject_endpoint(subject: Subject = Depends(require_subject)):
    """Return the subject resolved for the request (401 without a known user)."""
    return subject


@router.get("/status", response_model=AccessStatusResponse)
def get_status_endpoint(subject: Optional[Subject] = Depends(get_current_subject)):
    """Report whether the request carries a known user. Never fails."""
    return AccessStatusResponse(authenticated=subject is not None, subject=subject)


@router.post("/documents/evaluate", response_model=DocumentCapabilities)
def evaluate_document_endpoint(document: Document, subject: Subject = Depends(require_subject)):
    return evaluate_document(subject, document)


@router.post("/projects/evaluate", response_model=ProjectCapabilities)
def evaluate_project_endpoint(project: Project, subject: Subject = Depends(require_subject)):
    return evaluate_project(subject, project)


@router.post("/announcements/evaluate", response_model=AnnouncementCapabilities)
def evaluate_announcement_endpoint(announcement: Announcement, subject: Subject = Depends(require_subject)):
    return evaluate_announcement(subject, announcement)
