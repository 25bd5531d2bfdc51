"""
Infrastructure Package - Lazy Loading Implementation.

Catalog and log implementations, imported on first access so that importing
the package does not pull in psycopg or read configuration. The CLI
validates the environment before anything here is touched.
"""

from typing import TYPE_CHECKING

# For type checking only - doesn't actually import at runtime
if TYPE_CHECKING:
    from .postgresql import PostgreSQLRepository as _PostgreSQLRepository
    from .postgresql import PostgreSQLExtensionCatalog as _PostgreSQLExtensionCatalog
    from .action_log import JSONLActionLog as _JSONLActionLog
    from .action_log import NullActionLog as _NullActionLog
    from .interface_repository import (
        IExtensionCatalog as _IExtensionCatalog,
        IActionLog as _IActionLog,
    )


def __getattr__(name: str):
    """
    Lazy import mechanism - only imports when actually accessed.
    """
    # PostgreSQL catalog
    if name == "PostgreSQLRepository":
        from .postgresql import PostgreSQLRepository
        return PostgreSQLRepository
    elif name == "PostgreSQLExtensionCatalog":
        from .postgresql import PostgreSQLExtensionCatalog
        return PostgreSQLExtensionCatalog

    # Action log
    elif name == "JSONLActionLog":
        from .action_log import JSONLActionLog
        return JSONLActionLog
    elif name == "NullActionLog":
        from .action_log import NullActionLog
        return NullActionLog

    # Interfaces
    elif name == "IExtensionCatalog":
        from .interface_repository import IExtensionCatalog
        return IExtensionCatalog
    elif name == "IActionLog":
        from .interface_repository import IActionLog
        return IActionLog

    raise AttributeError(f"module 'infrastructure' has no attribute '{name}'")


__all__ = [
    "PostgreSQLRepository",
    "PostgreSQLExtensionCatalog",
    "JSONLActionLog",
    "NullActionLog",
    "IExtensionCatalog",
    "IActionLog",
]
