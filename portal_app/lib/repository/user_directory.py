"""
In-process user directory.

Holds the user records the subject resolver reads. The portal's real
directory lives in the document store; this class is the default provider
for the FastAPI dependency and is replaced through dependency overrides
when the application is mounted on a real store.
"""

import threading
from typing import Any, Iterable, Mapping, Optional, Union

from ..models.models_access import UserRecord


class UserDirectory:
    """Thread-safe mapping of user id to stored user record."""

    def __init__(self, records: Iterable[Union[UserRecord, Mapping[str, Any]]] = ()):
        self._lock = threading.Lock()
        self._records: dict[str, UserRecord] = {}
        for record in records:
            self.add_user(record)

    def add_user(self, record: Union[UserRecord, Mapping[str, Any]]) -> UserRecord:
        """Add or replace a user record."""
        if not isinstance(record, UserRecord):
            record = UserRecord.model_validate(dict(record))
        with self._lock:
            self._records[record.id] = record
        return record

    def remove_user(self, user_id: str) -> bool:
        with self._lock:
            return self._records.pop(user_id, None) is not None

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        """Return the record for ``user_id`` or None. Usable as a user lookup."""
        with self._lock:
            return self._records.get(user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
