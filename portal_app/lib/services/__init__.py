"""
Services that apply access decisions to resource snapshots.
"""

from portal_app.lib.services.instruction_service import (
    add_instruction,
    edit_instruction,
    set_instruction_done,
    delete_instruction,
)
from portal_app.lib.services.project_service import (
    prepare_departments,
    resolve_assignments,
    create_project,
    update_project,
    project_for_subject,
)

__all__ = [
    "add_instruction",
    "edit_instruction",
    "set_instruction_done",
    "delete_instruction",
    "prepare_departments",
    "resolve_assignments",
    "create_project",
    "update_project",
    "project_for_subject",
]
