"""
Pydantic models for the access-control engine.

Subjects and capability sets are frozen value objects. Resources
(documents, projects, assignments, instructions) are snapshots loaded by the
caller; the engine never mutates them, the service layer returns updated
copies instead.
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


HierarchyLevel = Literal[0, 1, 2, 3]


class Role(str, Enum):
    """Subject roles, ordered by privilege: admin > pm > general."""
    ADMIN = 'admin'
    PM = 'pm'
    GENERAL = 'general'

    @property
    def rank(self) -> int:
        """Privilege rank, higher is more privileged."""
        return _ROLE_RANKS[self]


_ROLE_RANKS = {Role.GENERAL: 0, Role.PM: 1, Role.ADMIN: 2}


class InstructionScope(str, Enum):
    GENERAL = 'general'
    ASSIGNMENT = 'assignment'


class Subject(BaseModel):
    """
    The authenticated actor a decision is made for.

    Built by the subject resolver, never by hand in request handlers.
    ``departments`` keeps display spelling; comparisons are case-insensitive.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    role: Role = Role.GENERAL
    departments: frozenset[str]

    @field_validator('departments')
    @classmethod
    def validate_departments(cls, v: frozenset[str]) -> frozenset[str]:
        if not v:
            raise ValueError("Subject must belong to at least one department")
        return v

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_pm(self) -> bool:
        return self.role == Role.PM


class UserRecord(BaseModel):
    """
    Stored directory record for an account.

    The directory holds departments in three shapes: a list, a
    comma-separated string, or a legacy single ``department`` field.
    """
    model_config = ConfigDict(from_attributes=True, extra='ignore')

    id: str
    role: Optional[str] = None  # 'admin', 'pm', 'pr_manager', 'user', ...
    departments: Union[list[str], str, None] = None
    department: Optional[str] = None  # Legacy single-department field
    name: str = ""
    email: str = ""


class Document(BaseModel):
    """Uploaded document as seen by the access evaluator."""
    id: str
    owner_id: str  # Id of the uploading user
    is_private: bool = False
    hierarchy_level: Optional[HierarchyLevel] = None  # 0=admin-only ... 3=public
    access_roles: list[str] = Field(default_factory=list)  # Department names, used at level 2

    @model_validator(mode='after')
    def apply_level_defaults(self) -> 'Document':
        if self.is_private:
            # Private documents ignore the hierarchy
            self.hierarchy_level = None
        elif self.hierarchy_level is None:
            self.hierarchy_level = 3
        return self


class Instruction(BaseModel):
    """Task or note attached to a project or to one assignment."""
    id: str
    text: str
    author_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    scope: InstructionScope = InstructionScope.ASSIGNMENT
    done: bool = False  # Assignment scope only
    done_at: Optional[datetime] = None
    documents: list[str] = Field(default_factory=list)  # Capped by the service layer

    @field_validator('documents', mode='before')
    @classmethod
    def validate_documents(cls, v):
        """Linked documents form a set; keep first occurrence order."""
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return list(dict.fromkeys(v))
        return v

    @model_validator(mode='after')
    def validate_done_state(self) -> 'Instruction':
        if self.scope == InstructionScope.GENERAL and (self.done or self.done_at is not None):
            raise ValueError("General instructions cannot carry a done state")
        return self


class Assignment(BaseModel):
    """Link between a project and one user, with its own instructions."""
    user_id: str
    departments: list[str] = Field(default_factory=list)  # Snapshot at assignment time
    name: str = ""
    email: str = ""
    instructions: list[Instruction] = Field(default_factory=list)


class Project(BaseModel):
    """Project snapshot as seen by the access evaluators."""
    id: str
    owner_id: str
    title: str = ""
    departments: list[str] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    general_instructions: list[Instruction] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    def get_assignment(self, user_id: Optional[str]) -> Optional[Assignment]:
        """Return the assignment for ``user_id`` or None."""
        if not user_id:
            return None
        for assignment in self.assignments:
            if assignment.user_id == user_id:
                return assignment
        return None

    def assignment_index(self, user_id: Optional[str]) -> int:
        """Return the position of the user's assignment, or -1."""
        for index, assignment in enumerate(self.assignments):
            if assignment.user_id == user_id:
                return index
        return -1


class AssignmentRequest(BaseModel):
    """Requested assignment as submitted by a project editor."""
    user_id: str
    instructions: list[Instruction] = Field(default_factory=list)


class Announcement(BaseModel):
    """Entry of the portal's update feed, targeted at departments."""
    id: str
    author_id: str
    title: str = ""
    message: str = ""
    departments: list[str] = Field(default_factory=list)  # Target departments
    created_at: Optional[datetime] = None  # Timezone-aware
    happens_at: Optional[datetime] = None


# Capability sets

class DocumentCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_view: bool
    can_download: bool
    can_publish_at_requested_level: bool


class ProjectCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_view: bool
    can_edit: bool
    can_delete: bool
    can_manage_assignments: bool


class InstructionCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_create: bool
    can_edit_text: bool
    can_toggle_done: bool
    can_delete: bool


class AnnouncementCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_view: bool
    can_edit: bool
    can_delete: bool


# API responses

class AccessStatusResponse(BaseModel):
    """Response for the optional-authentication status endpoint."""
    authenticated: bool
    subject: Optional[Subject] = None
