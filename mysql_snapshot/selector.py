"""
Table and view selection for MySQL Snapshot.
"""

import logging

from .models import TableFilter


def matches_entry(name: str, entry: str) -> bool:
    """
    Check if an object name matches one filter entry.

    Supports:
    - Exact matches: 'users'
    - Prefix patterns: 'wp_*'
    """
    entry = entry.strip()
    if entry.endswith(TableFilter.WILDCARD):
        return name.startswith(entry.rstrip(TableFilter.WILDCARD))
    return name == entry


def matches_any(name: str, entries: list[str]) -> bool:
    for entry in entries:
        if matches_entry(name, entry):
            logging.debug(f"Object '{name}' matched by filter entry '{entry}'")
            return True
    return False


def select_objects(all_names: list[str], table_filter: TableFilter) -> list[str]:
    """
    Resolve a table filter against the catalog names.

    The catalog order is preserved. A filter matching nothing yields an
    empty selection.
    """
    if table_filter.is_empty:
        return list(all_names)

    patterns = table_filter.patterns
    if table_filter.is_exclusion:
        selected = [name for name in all_names if not matches_any(name, patterns)]
        excluded_count = len(all_names) - len(selected)
        if excluded_count > 0:
            logging.info(f"Excluded {excluded_count} object(s) matching exclusion patterns")
        return selected

    return [name for name in all_names if matches_any(name, patterns)]
