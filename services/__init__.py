"""
Bootstrap Services.

Services hold the run-time behaviour; the pure pieces they drive live in
core.logic, the I/O they use in infrastructure.

Exports:
    ExtensionBootstrapper: One bootstrap run
    RestartGatedApplier: Action executor
    RestartConfigWriter: Server configuration updater
"""

from .extension_applier import RestartGatedApplier, AWAITING_RESTART_REASON
from .restart_config_writer import RestartConfigWriter
from .bootstrap_service import ExtensionBootstrapper

__all__ = [
    'ExtensionBootstrapper',
    'RestartGatedApplier',
    'RestartConfigWriter',
    'AWAITING_RESTART_REASON',
]
