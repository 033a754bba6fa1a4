"""
Instruction mutations applied to project snapshots.

Every function first requires access to the project itself, so a subject
without it gets Forbidden before any nested id is looked up. The relevant
instruction capability is checked next. Each returns an updated copy of the
project; the input snapshot is never modified. Callers persist
the result with an atomic update keyed on the project id.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from ..models.models_access import Instruction, InstructionScope, Project, Subject
from ..permissions.errors import InvalidOperation, ResourceNotFound
from ..permissions.instruction_access import (
    require_instruction_create,
    require_instruction_delete,
    require_instruction_edit,
    require_toggle_done,
)
from ..permissions.project_access import require_project_view
from ..utils.logging_utils import get_logger
from ..utils.stable_id import generate_stable_id

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_text(text: Optional[str]) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise InvalidOperation("Instruction text is required.")
    return cleaned


def _clean_documents(documents: Iterable[str]) -> list[str]:
    from portal_app.config import get_settings

    limit = get_settings().max_instruction_documents
    cleaned = list(dict.fromkeys(doc_id for doc_id in documents if doc_id))
    if len(cleaned) > limit:
        raise InvalidOperation(f"An instruction can link at most {limit} documents.")
    return cleaned


def _instruction_ids(project: Project) -> set[str]:
    ids = {ins.id for ins in project.general_instructions}
    for assignment in project.assignments:
        ids.update(ins.id for ins in assignment.instructions)
    return ids


def _instructions_for(project: Project, scope: InstructionScope, target_user_id: Optional[str]) -> list[Instruction]:
    if scope == InstructionScope.GENERAL:
        return project.general_instructions
    assignment = project.get_assignment(target_user_id)
    if assignment is None:
        raise ResourceNotFound("Assignment not found.")
    return assignment.instructions


def _find(instructions: list[Instruction], instruction_id: str) -> int:
    for index, instruction in enumerate(instructions):
        if instruction.id == instruction_id:
            return index
    raise ResourceNotFound("Instruction not found.")


def _with_instructions(
    project: Project,
    scope: InstructionScope,
    target_user_id: Optional[str],
    instructions: list[Instruction],
    now: datetime
) -> Project:
    if scope == InstructionScope.GENERAL:
        return project.model_copy(update={'general_instructions': instructions, 'updated_at': now})

    index = project.assignment_index(target_user_id)
    assignments = list(project.assignments)
    assignments[index] = assignments[index].model_copy(update={'instructions': instructions})
    return project.model_copy(update={'assignments': assignments, 'updated_at': now})


def add_instruction(
    subject: Subject,
    project: Project,
    text: str,
    scope: InstructionScope = InstructionScope.ASSIGNMENT,
    target_user_id: Optional[str] = None,
    documents: Iterable[str] = (),
    now: Optional[datetime] = None
) -> tuple[Project, Instruction]:
    """
    Add an instruction to a project or to one of its assignments.

    Args:
        subject: Current subject
        project: Project snapshot
        text: Instruction text (trimmed, required)
        scope: General or assignment scope
        target_user_id: Assignee for assignment scope (defaults to the subject)
        documents: Linked document ids
        now: Timestamp override

    Returns:
        Tuple of (updated project, new instruction)

    Raises:
        InvalidOperation: Empty text, too many documents, or no such assignment
        Forbidden: Subject may not create the instruction
    """
    require_project_view(subject, project)

    now = now or _utcnow()
    scope = InstructionScope(scope)
    target = None
    if scope == InstructionScope.ASSIGNMENT:
        target = target_user_id or subject.id

    instruction = Instruction(
        id=generate_stable_id(_instruction_ids(project)),
        text=_clean_text(text),
        author_id=subject.id,
        created_at=now,
        scope=scope,
        documents=_clean_documents(documents)
    )
    require_instruction_create(subject, project, instruction, target)

    instructions = list(_instructions_for(project, scope, target))
    instructions.append(instruction)
    logger.info(f"Instruction {instruction.id} added to project {project.id} ({scope.value}) by {subject.id}")
    return _with_instructions(project, scope, target, instructions, now), instruction


def edit_instruction(
    subject: Subject,
    project: Project,
    instruction_id: str,
    text: Optional[str] = None,
    documents: Optional[Iterable[str]] = None,
    scope: InstructionScope = InstructionScope.ASSIGNMENT,
    target_user_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Project:
    """
    Change the text and/or linked documents of an instruction.

    Raises:
        InvalidOperation: Nothing to update, empty text, too many documents
        ResourceNotFound: Unknown assignment or instruction
        Forbidden: Subject may not edit the instruction
    """
    require_project_view(subject, project)

    if text is None and documents is None:
        raise InvalidOperation("Nothing to update.")

    now = now or _utcnow()
    scope = InstructionScope(scope)
    target = (target_user_id or subject.id) if scope == InstructionScope.ASSIGNMENT else None

    instructions = list(_instructions_for(project, scope, target))
    index = _find(instructions, instruction_id)
    current = instructions[index]
    require_instruction_edit(subject, project, current, target)

    update = {'updated_at': now}
    if text is not None:
        update['text'] = _clean_text(text)
    if documents is not None:
        update['documents'] = _clean_documents(documents)

    instructions[index] = current.model_copy(update=update)
    logger.info(f"Instruction {instruction_id} on project {project.id} edited by {subject.id}")
    return _with_instructions(project, scope, target, instructions, now)


def set_instruction_done(
    subject: Subject,
    project: Project,
    instruction_id: str,
    done: bool,
    scope: InstructionScope = InstructionScope.ASSIGNMENT,
    target_user_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Project:
    """
    Mark an assignment instruction done or open again.

    Raises:
        InvalidOperation: For general-scope instructions
        ResourceNotFound: Unknown assignment or instruction
        Forbidden: Subject is not the assignee
    """
    require_project_view(subject, project)

    scope = InstructionScope(scope)
    if scope == InstructionScope.GENERAL:
        raise InvalidOperation("General instructions cannot be marked done.")

    now = now or _utcnow()
    target = target_user_id or subject.id

    instructions = list(_instructions_for(project, scope, target))
    index = _find(instructions, instruction_id)
    current = instructions[index]
    require_toggle_done(subject, project, current, target)

    instructions[index] = current.model_copy(update={
        'done': bool(done),
        'done_at': now if done else None
    })
    logger.info(
        f"Instruction {instruction_id} on project {project.id} marked "
        f"{'done' if done else 'open'} by {subject.id}"
    )
    return _with_instructions(project, scope, target, instructions, now)


def delete_instruction(
    subject: Subject,
    project: Project,
    instruction_id: str,
    scope: InstructionScope = InstructionScope.ASSIGNMENT,
    target_user_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Project:
    """
    Remove an instruction.

    Raises:
        ResourceNotFound: Unknown assignment or instruction
        Forbidden: Subject is not admin, owner or a project manager with access
    """
    require_project_view(subject, project)

    now = now or _utcnow()
    scope = InstructionScope(scope)
    target = (target_user_id or subject.id) if scope == InstructionScope.ASSIGNMENT else None

    instructions = list(_instructions_for(project, scope, target))
    index = _find(instructions, instruction_id)
    require_instruction_delete(subject, project, instructions[index], target)

    del instructions[index]
    logger.info(f"Instruction {instruction_id} on project {project.id} deleted by {subject.id}")
    return _with_instructions(project, scope, target, instructions, now)
