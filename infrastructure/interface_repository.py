"""
Repository Abstract Base Classes - Single Point of Truth.

Enforces exact method signatures across all catalog implementations (the
PostgreSQL catalog and the in-memory one used by tests). All parameter names,
return types, and method signatures are defined here and nowhere else.

Philosophy: "Define once, enforce everywhere"

Exports:
    IExtensionCatalog: Per-database extension catalog interface
    IActionLog: Action log interface
"""

from abc import ABC, abstractmethod

from core.models import BootstrapAction


# ============================================================================
# ABSTRACT BASE CLASSES - Enforce exact signatures
# ============================================================================

class IExtensionCatalog(ABC):
    """
    Extension catalog of a PostgreSQL server, addressed per database.

    Implementations MUST be create-if-absent: creating an extension that is
    already installed succeeds and reports no change.
    """

    @abstractmethod
    def create_extension(self, database: str, extension: str, timeout_seconds: float) -> bool:
        """
        Install an extension into one database if it is not installed yet.

        Returns:
            True if the catalog changed, False if it was already installed

        Raises:
            ExtensionTimeoutError: The statement exceeded timeout_seconds
            ExtensionCreateError: Any other failure
        """
        pass


class IActionLog(ABC):
    """
    Destination for per-action audit records.
    """

    @abstractmethod
    def record(self, run_id: str, action: BootstrapAction) -> None:
        """Append one record for a finished action. Must not raise."""
        pass
