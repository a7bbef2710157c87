"""
Materialized path helpers for the asset hierarchy.

A path is the `/`-delimited chain of ancestor ids ending with the asset's own
id, e.g. `/A/B/C`. Subtree queries become prefix matches on `path`.
"""

from typing import List, Optional

PATH_DELIMITER = "/"


def compute_path(parent_path: Optional[str], item_id) -> str:
    """
    Build the materialized path of an item.

    Examples:
        >>> compute_path(None, 'A')
        '/A'
        >>> compute_path('/A/B', 'C')
        '/A/B/C'
    """
    if parent_path:
        return f"{parent_path}{PATH_DELIMITER}{item_id}"
    return f"{PATH_DELIMITER}{item_id}"


def descendant_prefix(path: str) -> str:
    """Prefix shared by every strict descendant of `path`."""
    return f"{path}{PATH_DELIMITER}"


def is_descendant_path(candidate_ancestor_path: str, path: Optional[str]) -> bool:
    """
    True when `path` lies strictly below `candidate_ancestor_path`.

    Examples:
        >>> is_descendant_path('/A', '/A/B')
        True
        >>> is_descendant_path('/A', '/A')
        False
        >>> is_descendant_path('/A', '/AB')
        False
    """
    if not candidate_ancestor_path or not path:
        return False
    return path.startswith(descendant_prefix(candidate_ancestor_path))


def parse_path(path: Optional[str]) -> List[str]:
    """
    Split a path into ids, root first.

    Examples:
        >>> parse_path('/A/B/C')
        ['A', 'B', 'C']
    """
    if not path:
        return []
    return [part for part in path.split(PATH_DELIMITER) if part]


def path_depth(path: str) -> int:
    """Depth of the item, 0 for roots."""
    return max(len(parse_path(path)) - 1, 0)


def parent_path(path: str) -> Optional[str]:
    """Path of the parent, None for roots."""
    parts = parse_path(path)
    if len(parts) <= 1:
        return None
    return PATH_DELIMITER + PATH_DELIMITER.join(parts[:-1])


def ancestor_ids(path: str) -> List[str]:
    """Ids of all ancestors, root first, excluding the item itself."""
    return parse_path(path)[:-1]


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> str:
    """
    Swap the `old_prefix` of `path` for `new_prefix`.

    In-memory twin of the bulk descendant rewrite done on move.

        >>> rebase_path('/A/B/C', '/A/B', '/B')
        '/B/C'
    """
    if path != old_prefix and not path.startswith(descendant_prefix(old_prefix)):
        raise ValueError(f"'{path}' is not inside '{old_prefix}'")
    return new_prefix + path[len(old_prefix):]
