"""
Announcement access control.

Announcements (entries of the portal's update feed) target a set of
departments. A subject sees an announcement if it targets the default
department, shares a department with the subject, or was written by the
subject. Only admins and the author may change or remove it.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..models.models_access import Announcement, AnnouncementCapabilities, Subject
from ..utils.logging_utils import get_logger
from .department_utils import departments_overlap
from .errors import Forbidden

logger = get_logger(__name__)

# Announcements older than this move to the archive
ARCHIVE_AFTER = timedelta(days=1)


def is_announcement_author(subject: Subject, announcement: Announcement) -> bool:
    return subject.id == announcement.author_id


def targets_everyone(announcement: Announcement, default_department: Optional[str] = None) -> bool:
    """True if the announcement targets the default (company-wide) department."""
    if default_department is None:
        from portal_app.config import get_settings
        default_department = get_settings().default_department
    return departments_overlap(announcement.departments, [default_department])


def can_view_announcement(
    subject: Subject,
    announcement: Announcement,
    default_department: Optional[str] = None
) -> bool:
    return (
        subject.is_admin
        or is_announcement_author(subject, announcement)
        or targets_everyone(announcement, default_department)
        or departments_overlap(announcement.departments, subject.departments)
    )


def can_edit_announcement(subject: Subject, announcement: Announcement) -> bool:
    return subject.is_admin or is_announcement_author(subject, announcement)


def evaluate_announcement(
    subject: Subject,
    announcement: Announcement,
    default_department: Optional[str] = None
) -> AnnouncementCapabilities:
    """
    Evaluate all announcement capabilities for a subject.

    Args:
        subject: Current subject
        announcement: Announcement snapshot
        default_department: Company-wide department name (defaults to the
            configured default department)

    Returns:
        AnnouncementCapabilities
    """
    can_edit = can_edit_announcement(subject, announcement)
    capabilities = AnnouncementCapabilities(
        can_view=can_view_announcement(subject, announcement, default_department),
        can_edit=can_edit,
        can_delete=can_edit
    )
    logger.debug(f"Announcement {announcement.id} for {subject.id}: {capabilities}")
    return capabilities


def is_archived(announcement: Announcement, now: Optional[datetime] = None) -> bool:
    """True once the announcement is older than ARCHIVE_AFTER."""
    if announcement.created_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    return announcement.created_at < now - ARCHIVE_AFTER


# Guards

def require_announcement_view(subject: Subject, announcement: Announcement) -> None:
    if not can_view_announcement(subject, announcement):
        raise Forbidden("Forbidden.")


def require_announcement_edit(subject: Subject, announcement: Announcement) -> None:
    if not can_edit_announcement(subject, announcement):
        raise Forbidden("You can only edit your own announcements.")


def require_announcement_delete(subject: Subject, announcement: Announcement) -> None:
    if not can_edit_announcement(subject, announcement):
        raise Forbidden("You can only delete your own announcements.")


class AnnouncementAccessFilter:
    """Filters announcement feeds based on subject access."""

    @staticmethod
    def filter_announcements_by_access(
        announcements: Iterable[Announcement],
        subject: Subject,
        archived: Optional[bool] = None,
        now: Optional[datetime] = None,
        default_department: Optional[str] = None
    ) -> List[Announcement]:
        """
        Filter an announcement feed based on subject access.

        Args:
            announcements: Announcement snapshots
            subject: Current subject
            archived: True for the archive only, False for the current feed
                only, None for both
            now: Reference time for the archive cut-off
            default_department: Company-wide department name

        Returns:
            Visible announcements, newest first
        """
        now = now or datetime.now(timezone.utc)
        visible = [
            announcement for announcement in announcements
            if can_view_announcement(subject, announcement, default_department)
            and (archived is None or is_archived(announcement, now) == archived)
        ]
        return sorted(
            visible,
            key=lambda announcement: announcement.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True
        )
