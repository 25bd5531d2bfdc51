"""
In-memory extension catalog for tests.

Behaves like the PostgreSQL catalog: create-if-absent per database, with
failures and timeouts injected per extension or per (database, extension).
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from exceptions import ExtensionCreateError, ExtensionTimeoutError
from infrastructure.interface_repository import IExtensionCatalog

FailureKey = Union[str, Tuple[str, str]]


class InMemoryExtensionCatalog(IExtensionCatalog):
    """
    Args:
        installed: database -> extension names already present
        failures: extension or (database, extension) -> error message
        timeouts: extensions or (database, extension) pairs that time out
    """

    def __init__(
        self,
        installed: Optional[Dict[str, Iterable[str]]] = None,
        failures: Optional[Dict[FailureKey, str]] = None,
        timeouts: Optional[Iterable[FailureKey]] = None
    ):
        self.installed: Dict[str, Set[str]] = defaultdict(set)
        for database, names in (installed or {}).items():
            self.installed[database].update(names)
        self.failures: Dict[FailureKey, str] = dict(failures or {})
        self.timeouts: Set[FailureKey] = set(timeouts or ())
        self.calls: List[Tuple[str, str]] = []
        self.timeouts_seen: List[float] = []

    def create_extension(self, database: str, extension: str, timeout_seconds: float) -> bool:
        self.calls.append((database, extension))
        self.timeouts_seen.append(timeout_seconds)

        if (database, extension) in self.timeouts or extension in self.timeouts:
            raise ExtensionTimeoutError(timeout_seconds, extension=extension, database=database)

        message = self.failures.get((database, extension)) or self.failures.get(extension)
        if message:
            raise ExtensionCreateError(message, extension=extension, database=database)

        if extension in self.installed[database]:
            return False
        self.installed[database].add(extension)
        return True

    def attempted(self, database: str, extension: str) -> bool:
        return (database, extension) in self.calls
