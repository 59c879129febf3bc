"""Safe recursive deletion.

This module provides the deletion engine, its request/outcome models,
and diagnostic message building.
"""

from purgetree.deletion.diagnostics import build_help_message, list_remaining_paths
from purgetree.deletion.engine import DELETE_RETRY_DELAY, DeletionEngine
from purgetree.deletion.models import (
    DeletionOutcome,
    DeletionRequest,
    FailureSet,
    NodeState,
    TraversalNode,
)

__all__ = [
    "DELETE_RETRY_DELAY",
    "DeletionEngine",
    "DeletionOutcome",
    "DeletionRequest",
    "FailureSet",
    "NodeState",
    "TraversalNode",
    "build_help_message",
    "list_remaining_paths",
]
