"""OperationState model for per-field draft actions."""

from enum import Enum


class OperationState(str, Enum):
    """What a field's draft action is currently doing."""

    IDLE = "idle"
    ACCEPTING = "accepting"
    REJECTING = "rejecting"
    REGENERATING = "regenerating"
