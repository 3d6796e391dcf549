from .events import (
    TRANSITION_APPLIED,
    TRANSITION_CONFIRMED,
    TRANSITION_FAILED,
    TRANSITION_REJECTED,
    BoardEvent,
    EventChannel,
)
from .state import TaskBoard

__all__ = [
    "TRANSITION_APPLIED",
    "TRANSITION_CONFIRMED",
    "TRANSITION_FAILED",
    "TRANSITION_REJECTED",
    "BoardEvent",
    "EventChannel",
    "TaskBoard",
]
