"""
Pydantic models for the portal access-control engine.
"""

from portal_app.lib.models.models_access import (
    Role,
    InstructionScope,
    Subject,
    UserRecord,
    Document,
    Instruction,
    Assignment,
    Project,
    AssignmentRequest,
    Announcement,
    DocumentCapabilities,
    ProjectCapabilities,
    InstructionCapabilities,
    AnnouncementCapabilities,
    AccessStatusResponse,
)

__all__ = [
    "Role",
    "InstructionScope",
    "Subject",
    "UserRecord",
    "Document",
    "Instruction",
    "Assignment",
    "Project",
    "AssignmentRequest",
    "Announcement",
    "DocumentCapabilities",
    "ProjectCapabilities",
    "InstructionCapabilities",
    "AnnouncementCapabilities",
    "AccessStatusResponse",
]
