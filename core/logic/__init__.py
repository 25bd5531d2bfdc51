"""
Core Business Logic Package.

Contains business logic that operates on pure data models.
Separated from models to maintain clean architecture.

Exports:
    State transitions: can_action_transition, is_action_terminal
    Resolution: resolve_install_order, find_cycle, validate_dependency_graph
    Fan-out: build_targets, expand_actions
"""

# State transitions
from .transitions import (
    can_action_transition,
    get_action_terminal_states,
    is_action_terminal
)

# Dependency resolution
from .resolver import (
    collect_dependency_closure,
    find_cycle,
    resolve_install_order,
    validate_dependency_graph
)

# Scope fan-out
from .fanout import (
    build_targets,
    expand_actions
)

__all__ = [
    # State transitions
    'can_action_transition',
    'get_action_terminal_states',
    'is_action_terminal',

    # Dependency resolution
    'collect_dependency_closure',
    'find_cycle',
    'resolve_install_order',
    'validate_dependency_graph',

    # Scope fan-out
    'build_targets',
    'expand_actions'
]
