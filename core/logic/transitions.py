"""
State Transition Logic for Bootstrap Actions.

Contains business rules for valid action state transitions.
Separated from data models for clean architecture.

Exports:
    can_action_transition: Check if an action state transition is valid
    get_action_terminal_states: Get terminal states for actions
    is_action_terminal: Check if an action is in a terminal state

Dependencies:
    core.models.enums: ActionState
"""

from typing import List

from ..models.enums import ActionState


def can_action_transition(current: ActionState, target: ActionState) -> bool:
    """
    Check if an action can transition from current to target state.

    Args:
        current: Current action state
        target: Target action state

    Returns:
        True if transition is valid, False otherwise
    """
    # Same state is always allowed (no-op)
    if current == target:
        return True

    # Actions are created fresh every run, so terminal means terminal:
    # a deferred action is retried by the next run, never by this one.
    transitions = {
        ActionState.PENDING: [
            ActionState.APPLIED,
            ActionState.DEFERRED,
            ActionState.FAILED
        ],
        ActionState.APPLIED: [],  # Terminal state
        ActionState.DEFERRED: [],  # Terminal state
        ActionState.FAILED: []  # Terminal state
    }

    return target in transitions.get(current, [])


def get_action_terminal_states() -> List[ActionState]:
    """
    Get list of terminal states for actions.

    Returns:
        List of terminal action states
    """
    return [
        ActionState.APPLIED,
        ActionState.DEFERRED,
        ActionState.FAILED
    ]


def is_action_terminal(state: ActionState) -> bool:
    """Check if an action state is terminal."""
    return state in get_action_terminal_states()
