"""
Pure Enumeration Types for the Bootstrap Core.

Defines valid states for bootstrap actions and the install scopes of
extensions. No business logic - pure type definitions only.

Exports:
    ActionState: Bootstrap action state enumeration
    TargetScope: Where an extension gets installed
"""

from enum import Enum


class ActionState(Enum):
    """
    Valid states for a bootstrap action.

    State transitions:
    - PENDING -> APPLIED (created, or already present)
    - PENDING -> DEFERRED (awaiting restart, or blocked by a dependency)
    - PENDING -> FAILED (create error or timeout)
    """

    PENDING = "pending"
    APPLIED = "applied"
    DEFERRED = "deferred"
    FAILED = "failed"


class TargetScope(Enum):
    """
    Install scope of an extension.

    TEMPLATE_ONLY extensions are created once in the template database and
    reach new databases through cloning. ALL_DATABASES extensions are
    re-applied to every target database.
    """

    TEMPLATE_ONLY = "template_only"
    ALL_DATABASES = "all_databases"
