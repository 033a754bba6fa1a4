"""
Department-set primitives shared by all evaluators.

Department names are compared case-insensitively but stored and displayed
with their original spelling. Every comparison in the engine goes through
``department_key`` so that "Engineering", "engineering " and "ENGINEERING"
are the same department.
"""

from typing import Iterable, List, Optional, Union

from .errors import InvalidOperation


DepartmentInput = Union[str, Iterable[str], None]


def department_key(name: str) -> str:
    """
    Return the canonical comparison key for a department name.

    Args:
        name: Department display name

    Returns:
        Trimmed, casefolded name
    """
    return name.strip().casefold()


def department_keys(names: Optional[Iterable[str]]) -> frozenset:
    """Return the set of canonical keys for the given department names."""
    if not names:
        return frozenset()
    return frozenset(department_key(name) for name in names if name and name.strip())


def normalize_departments(value: DepartmentInput, limit: Optional[int] = None) -> List[str]:
    """
    Normalize raw department input into a list of unique display names.

    Accepts a list of names or a comma-separated string. Entries are trimmed,
    empty entries are removed and case-insensitive duplicates collapse onto
    the first spelling seen.

    Args:
        value: List of names, comma-separated string, or None
        limit: Maximum number of non-empty entries considered (before dedup)

    Returns:
        List of department names in input order
    """
    if value is None:
        return []

    if isinstance(value, str):
        raw = value.split(',')
    else:
        raw = list(value)

    entries = [item.strip() for item in raw if isinstance(item, str) and item.strip()]
    if limit is not None:
        entries = entries[:limit]

    seen = set()
    result = []
    for entry in entries:
        key = department_key(entry)
        if key in seen:
            continue
        seen.add(key)
        result.append(entry)
    return result


def departments_overlap(
    first: Iterable[str],
    second: Iterable[str],
    ignore: Iterable[str] = ()
) -> bool:
    """
    Check whether two department sets share at least one department.

    Args:
        first: Department names
        second: Department names
        ignore: Department names that never count as a match

    Returns:
        True if any non-ignored department appears in both sets
    """
    shared = department_keys(first) & department_keys(second)
    return bool(shared - department_keys(ignore))


def departments_cover(container: Iterable[str], required: Iterable[str]) -> bool:
    """
    Check whether ``container`` includes every department in ``required``.

    An empty ``required`` set is never covered: full coverage of nothing does
    not grant anything.
    """
    required_keys = department_keys(required)
    if not required_keys:
        return False
    return required_keys <= department_keys(container)


def departments_outside(allowed: Iterable[str], requested: Iterable[str]) -> List[str]:
    """Return the requested department names that are not in ``allowed``."""
    allowed_keys = department_keys(allowed)
    return [name for name in requested if department_key(name) not in allowed_keys]


def resolve_departments(requested: Iterable[str], catalog: Iterable[str]) -> List[str]:
    """
    Map requested department names onto the catalog's canonical spelling.

    Args:
        requested: Normalized department names from the caller
        catalog: Known department names

    Returns:
        Catalog spellings, in request order

    Raises:
        InvalidOperation: If any requested department is not in the catalog
    """
    by_key = {}
    for name in catalog:
        by_key.setdefault(department_key(name), name)

    resolved = []
    unknown = []
    for name in requested:
        match = by_key.get(department_key(name))
        if match is None:
            unknown.append(name)
        else:
            resolved.append(match)

    if unknown:
        raise InvalidOperation(f"One or more departments are invalid: {', '.join(unknown)}")
    return resolved
