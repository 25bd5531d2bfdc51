"""
Core Data Models Package.

Contains pure data structures without business logic.
All business logic is in the core.logic package.

Exports:
    ActionState, TargetScope: Enums
    ExtensionSpec, DatabaseTarget: Static configuration types
    BootstrapAction: One install attempt
    ConfigWriteResult, BootstrapReport: Result types
"""

# Enums
from .enums import (
    ActionState,
    TargetScope
)

# Configuration types
from .extension import (
    ExtensionSpec,
    DatabaseTarget,
    TEMPLATE_DATABASE_PLACEHOLDER
)

# Action
from .action import BootstrapAction

# Results
from .results import (
    ConfigWriteResult,
    BootstrapReport
)

__all__ = [
    'ActionState',
    'TargetScope',
    'ExtensionSpec',
    'DatabaseTarget',
    'TEMPLATE_DATABASE_PLACEHOLDER',
    'BootstrapAction',
    'ConfigWriteResult',
    'BootstrapReport',
]
