"""Lifecycle status transitions of an asset."""

from typing import Dict, FrozenSet, Union

from ...enum.asset_enum import AssetStatus
from .errors import InvalidTransitionError

S = AssetStatus

# the only place allowed edges are defined
ALLOWED_TRANSITIONS: Dict[AssetStatus, FrozenSet[AssetStatus]] = {
    S.operational: frozenset({S.maintenance, S.repair, S.retired, S.lost}),
    S.maintenance: frozenset({S.operational, S.repair, S.retired}),
    S.repair: frozenset({S.operational, S.maintenance, S.retired, S.disposed}),
    S.retired: frozenset({S.disposed}),
    S.disposed: frozenset(),
    S.lost: frozenset({S.operational}),  # found again
}


def allowed_transitions(status: Union[AssetStatus, str]) -> FrozenSet[AssetStatus]:
    return ALLOWED_TRANSITIONS[AssetStatus(status)]


def can_transition(current: Union[AssetStatus, str], requested: Union[AssetStatus, str]) -> bool:
    current, requested = AssetStatus(current), AssetStatus(requested)
    return current == requested or requested in ALLOWED_TRANSITIONS[current]


def transition(current: Union[AssetStatus, str], requested: Union[AssetStatus, str]) -> AssetStatus:
    """
    Validate `current -> requested` and return the resulting status.

    Staying in the same status is always allowed.
    """
    if not can_transition(current, requested):
        raise InvalidTransitionError(AssetStatus(current), AssetStatus(requested))
    return AssetStatus(requested)
