"""
Core Bootstrap Components.

Pure building blocks for extension bootstrap, separated from the database
and filesystem code that drives them.

Structure:
    models/: Pure data structures (no business logic)
    logic/: Business logic separated from models
    registry.py: Extension definitions
    errors.py: Error codes and classification

Exports:
    ExtensionRegistry: Extension definitions keyed by name
    ErrorCode: Error code enum
"""

# Make subpackages available first (no circular dependencies)
from . import models
from . import logic

from .errors import ErrorCode, ErrorClassification
from .registry import ExtensionRegistry, DEFAULT_EXTENSIONS

__all__ = [
    'models',
    'logic',
    'ErrorCode',
    'ErrorClassification',
    'ExtensionRegistry',
    'DEFAULT_EXTENSIONS',
]
