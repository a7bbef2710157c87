from typing import Optional

from .errors import CircularDependencyError, SelfParentError
from .path_codec import is_descendant_path


def validate_move(item_path: str, proposed_parent_path: Optional[str], item_id, proposed_parent_id) -> None:
    """
    Reject parent assignments that would break the forest.

    Must run before any path is written.
    """
    if proposed_parent_id is None:
        return

    if str(proposed_parent_id) == str(item_id):
        raise SelfParentError(item_id)

    if is_descendant_path(item_path, proposed_parent_path):
        raise CircularDependencyError(item_id, proposed_parent_id)
