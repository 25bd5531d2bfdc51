"""
Extension Registry.

The static catalogue of extensions the bootstrap knows how to install. Built
once at configuration load, validated fail-fast, and never mutated.

The built-in registry matches the development image: core contrib
extensions, the PostGIS family from the base image, and pgvector, pgRouting,
http and pg_cron from the distribution packages installed on top of it.

Usage:
    from core.registry import ExtensionRegistry

    registry = ExtensionRegistry.default()
    registry.validate()
    order = resolve_install_order(registry.default_requested(), registry)

    # Custom registry from a JSON list of ExtensionSpec objects
    registry = ExtensionRegistry.from_file("/etc/bootstrap/extensions.json")

Exports:
    ExtensionRegistry: name -> ExtensionSpec mapping
    DEFAULT_EXTENSIONS: Built-in ExtensionSpec list
    DEFAULT_REQUESTED: Names requested when no explicit list is configured
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from exceptions import RegistryError, UnknownExtensionError
from util_logger import LoggerFactory, ComponentType
from .logic.resolver import validate_dependency_graph
from .models.enums import TargetScope
from .models.extension import ExtensionSpec, TEMPLATE_DATABASE_PLACEHOLDER

logger = LoggerFactory.create_logger(ComponentType.VALIDATOR, "ExtensionRegistry")


def _spec(name: str, description: str, depends_on: Iterable[str] = (), **kwargs) -> ExtensionSpec:
    return ExtensionSpec(name=name, description=description, depends_on=frozenset(depends_on), **kwargs)


DEFAULT_EXTENSIONS: List[ExtensionSpec] = [
    # Core PostgreSQL contrib extensions
    _spec("uuid-ossp", "UUID generation"),
    _spec("hstore", "Key-value store"),
    _spec("pg_trgm", "Trigram matching for fuzzy search"),
    _spec("btree_gist", "Additional index types"),
    _spec("btree_gin", "Additional index types"),
    _spec("citext", "Case-insensitive text"),
    _spec("pgcrypto", "Cryptographic functions"),
    _spec("tablefunc", "Crosstab and pivot functions"),

    # Spatial extensions (from the PostGIS base image)
    _spec("postgis", "Spatial data types and functions"),
    _spec("postgis_topology", "Topology support", ["postgis"]),
    _spec("postgis_raster", "Raster data support", ["postgis"]),
    _spec("fuzzystrmatch", "Fuzzy string matching"),
    _spec("address_standardizer", "Address normalization"),
    _spec(
        "postgis_tiger_geocoder", "TIGER geocoder",
        ["postgis", "fuzzystrmatch", "address_standardizer"]
    ),

    # Additional packaged extensions
    _spec("vector", "pgvector for AI/ML embeddings"),
    _spec("pgrouting", "Routing algorithms", ["postgis"]),
    _spec("http", "HTTP client"),
    _spec(
        "pg_cron", "Job scheduling",
        requires_restart=True,
        preload_library="pg_cron",
        target_scope=TargetScope.TEMPLATE_ONLY,
        server_settings={"cron.database_name": TEMPLATE_DATABASE_PLACEHOLDER},
    ),
]

DEFAULT_REQUESTED: List[str] = [
    spec.name for spec in DEFAULT_EXTENSIONS if spec.name != "postgis_tiger_geocoder"
]


class ExtensionRegistry(Mapping):
    """
    Immutable name -> ExtensionSpec mapping.

    Implements the Mapping protocol so it can be handed straight to the
    resolver functions.
    """

    def __init__(self, specs: Iterable[ExtensionSpec], default_requested: Optional[Iterable[str]] = None):
        self._specs = {}
        for spec in specs:
            if spec.name in self._specs:
                raise RegistryError(f"Duplicate extension '{spec.name}' in registry")
            self._specs[spec.name] = spec
        self._default_requested = list(default_requested) if default_requested is not None else list(self._specs)

    # Mapping protocol

    def __getitem__(self, name: str) -> ExtensionSpec:
        return self._specs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"ExtensionRegistry({sorted(self._specs)})"

    # Queries

    def names(self) -> List[str]:
        """Registered names, sorted."""
        return sorted(self._specs)

    def default_requested(self) -> List[str]:
        """Names installed when the caller does not name any."""
        return list(self._default_requested)

    def restart_gated(self) -> List[ExtensionSpec]:
        return [spec for spec in self._specs.values() if spec.requires_restart]

    def validate(self) -> None:
        """
        Fail fast on a malformed registry.

        Raises:
            UnknownExtensionError: A dependency or default name is unknown
            CyclicDependencyError: The dependency graph has a cycle
        """
        validate_dependency_graph(self)
        for name in self._default_requested:
            if name not in self._specs:
                raise UnknownExtensionError(name, known=self._specs.keys())
        logger.debug(f"Registry valid: {len(self)} extensions")

    # Construction

    @classmethod
    def default(cls) -> "ExtensionRegistry":
        """Built-in registry for the development image."""
        return cls(DEFAULT_EXTENSIONS, default_requested=DEFAULT_REQUESTED)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ExtensionRegistry":
        """
        Load a registry from a JSON list of ExtensionSpec objects.

        Example file:
            [
                {"name": "postgis"},
                {"name": "pgrouting", "depends_on": ["postgis"]},
                {"name": "pg_cron", "requires_restart": true,
                 "target_scope": "template_only",
                 "server_settings": {"cron.database_name": "app"}}
            ]

        Raises:
            RegistryError: File missing, unreadable, or not a valid spec list
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryError(f"Cannot read registry file {path}: {e}") from e

        try:
            specs = TypeAdapter(List[ExtensionSpec]).validate_json(raw)
        except ValidationError as e:
            raise RegistryError(f"Invalid registry file {path}: {e}") from e

        logger.info(f"📋 Loaded {len(specs)} extension specs from {path}")
        return cls(specs)
