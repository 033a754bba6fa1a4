"""
Instruction access control.

Instructions live either on the project (general scope) or on one
assignment (assignment scope). Changing the text of a task and marking it
done are separate rights: admins, owners and project managers can edit any
instruction, but only the assignee can mark their own task done.
"""

from typing import Optional

from ..models.models_access import (
    Instruction,
    InstructionCapabilities,
    InstructionScope,
    Project,
    Subject,
)
from ..utils.logging_utils import get_logger
from .errors import Forbidden, InvalidOperation
from .project_access import is_assigned, is_project_owner, pm_has_access

logger = get_logger(__name__)


def _target_user(subject: Subject, target_user_id: Optional[str]) -> str:
    # Assignment-scope calls without a target act on the subject's own assignment
    return target_user_id or subject.id


def evaluate_instruction(
    subject: Subject,
    project: Project,
    instruction: Instruction,
    target_user_id: Optional[str] = None
) -> InstructionCapabilities:
    """
    Evaluate all instruction capabilities for a subject.

    Args:
        subject: Current subject
        project: Freshly loaded project snapshot
        instruction: Existing instruction, or the candidate for creation
        target_user_id: Assignee whose assignment holds the instruction
            (assignment scope only; defaults to the subject)

    Returns:
        InstructionCapabilities
    """
    is_admin = subject.is_admin
    is_owner = is_project_owner(subject, project)
    pm_access = pm_has_access(subject, project)

    can_edit_text = is_admin or is_owner or pm_access or subject.id == instruction.author_id
    can_delete = is_admin or is_owner or pm_access

    if instruction.scope == InstructionScope.GENERAL:
        can_create = is_admin or pm_access or is_assigned(subject, project)
        can_toggle_done = False
    else:
        target = _target_user(subject, target_user_id)
        assignment_exists = project.get_assignment(target) is not None
        is_assigned_subject = subject.id == target
        can_create = assignment_exists and (is_assigned_subject or is_admin or pm_access)
        can_toggle_done = assignment_exists and is_assigned_subject

    capabilities = InstructionCapabilities(
        can_create=can_create,
        can_edit_text=can_edit_text,
        can_toggle_done=can_toggle_done,
        can_delete=can_delete
    )
    logger.debug(
        f"Instruction {instruction.id} ({instruction.scope.value}) on project {project.id} "
        f"for {subject.id}: {capabilities}"
    )
    return capabilities


# Guards

def require_instruction_create(
    subject: Subject,
    project: Project,
    instruction: Instruction,
    target_user_id: Optional[str] = None
) -> None:
    """
    Raise unless the subject may create the instruction.

    Raises:
        InvalidOperation: If the target assignment does not exist
        Forbidden: If the subject lacks the create right
    """
    if instruction.scope == InstructionScope.ASSIGNMENT:
        target = _target_user(subject, target_user_id)
        if project.get_assignment(target) is None:
            raise InvalidOperation(f"No assignment for user {target} on this project.")

    if not evaluate_instruction(subject, project, instruction, target_user_id).can_create:
        raise Forbidden("Forbidden.")


def require_instruction_edit(
    subject: Subject,
    project: Project,
    instruction: Instruction,
    target_user_id: Optional[str] = None
) -> None:
    if not evaluate_instruction(subject, project, instruction, target_user_id).can_edit_text:
        raise Forbidden("Forbidden.")


def require_toggle_done(
    subject: Subject,
    project: Project,
    instruction: Instruction,
    target_user_id: Optional[str] = None
) -> None:
    """
    Raise unless the subject may toggle the done state.

    Raises:
        InvalidOperation: For general-scope instructions
        Forbidden: If the subject is not the assignee
    """
    if instruction.scope == InstructionScope.GENERAL:
        raise InvalidOperation("General instructions cannot be marked done.")

    if not evaluate_instruction(subject, project, instruction, target_user_id).can_toggle_done:
        raise Forbidden("Only the assignee can mark this instruction done.")


def require_instruction_delete(
    subject: Subject,
    project: Project,
    instruction: Instruction,
    target_user_id: Optional[str] = None
) -> None:
    if not evaluate_instruction(subject, project, instruction, target_user_id).can_delete:
        raise Forbidden("Forbidden.")
