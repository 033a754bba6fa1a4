"""
Short id generation for nested records.

Instructions live inside project snapshots and have no database-assigned
id, so the service layer generates short, collision-resistant ids that are
unique within the project.
"""

import secrets
from typing import Set

# Alphabet: lowercase letters + digits (no ambiguous characters)
# Excludes: 0/O, 1/l/I for readability
ALPHABET = 'abcdefghjkmnpqrstuvwxyz23456789'

MIN_LENGTH = 8
MAX_LENGTH = 16


def generate_stable_id(existing_ids: Set[str], length: int = MIN_LENGTH) -> str:
    """
    Generate an id not contained in ``existing_ids``.

    Grows the id by one character on collision.

    Args:
        existing_ids: Ids already used in the same project
        length: Initial length to try

    Returns:
        Unique id string

    Raises:
        RuntimeError: If unable to generate a unique id within max length
    """
    if length > MAX_LENGTH:
        raise RuntimeError(
            f"Unable to generate unique id: exceeded max length {MAX_LENGTH}"
        )

    stable_id = ''.join(secrets.choice(ALPHABET) for _ in range(length))

    if stable_id in existing_ids:
        return generate_stable_id(existing_ids, length + 1)

    return stable_id
