"""
Extension and Database Target Models.

Static configuration types, built once at configuration load and never
mutated for the lifetime of the process.

Exports:
    ExtensionSpec: One installable database extension
    DatabaseTarget: One database to bootstrap
    TEMPLATE_DATABASE_PLACEHOLDER: server_settings value replaced by the template name
"""

from typing import Dict, FrozenSet, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import TargetScope

# Resolved by the restart config writer to the run's template database
TEMPLATE_DATABASE_PLACEHOLDER = "{template_database}"


class ExtensionSpec(BaseModel):
    """
    One installable database extension.

    Frozen: specs are shared between every action of every run.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Extension name as used by CREATE EXTENSION")
    depends_on: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Extensions that must be installed first"
    )
    requires_restart: bool = Field(
        default=False,
        description="Needs a shared preload library and a server restart before it can be created"
    )
    target_scope: TargetScope = Field(
        default=TargetScope.ALL_DATABASES,
        description="Install once into the template, or into every target database"
    )
    preload_library: Optional[str] = Field(
        default=None,
        description="Library added to shared_preload_libraries (defaults to name when restart-gated)"
    )
    server_settings: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra server configuration entries written with the preload change"
    )
    description: str = Field(default="", description="What the extension is for")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Extension name must not be blank")
        return v

    @field_validator('depends_on', mode='before')
    @classmethod
    def normalize_depends_on(cls, v):
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError(f"depends_on must be a list of extension names, got {type(v).__name__}")
        names = set()
        for name in v:
            if not isinstance(name, str):
                raise ValueError(f"depends_on entries must be strings, got {name!r}")
            if name.strip():
                names.add(name.strip())
        return frozenset(names)

    @model_validator(mode='after')
    def default_preload_library(self) -> 'ExtensionSpec':
        if self.requires_restart and not self.preload_library:
            # frozen model: bypass __setattr__ guard during validation
            object.__setattr__(self, 'preload_library', self.name)
        return self

    def __str__(self) -> str:
        return self.name


class DatabaseTarget(BaseModel):
    """One database instance to bootstrap."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Database name")
    is_template: bool = Field(default=False, description="Cloning source for new databases")

    def __str__(self) -> str:
        return self.name
