"""
Randomized model factories: anti-overfitting design.

Every factory call generates randomized non-identity fields (descriptions)
so tests cannot rely on specific default values. Names and dependencies are
always explicit: they are what the tests are about.
"""

import random
import string
from typing import Iterable, Optional, Sequence

from core.models import ExtensionSpec, TargetScope
from core.registry import ExtensionRegistry


def _random_suffix(length: int = 6) -> str:
    """Generate random alphanumeric suffix."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def make_spec(
    name: str,
    depends_on: Iterable[str] = (),
    requires_restart: bool = False,
    target_scope: TargetScope = TargetScope.ALL_DATABASES,
    **overrides
) -> ExtensionSpec:
    """
    Build an ExtensionSpec with a randomized description.

    Args:
        name: Extension name
        depends_on: Dependency names
        requires_restart: Restart-gated flag
        target_scope: Install scope
        **overrides: Any other field

    Returns:
        ExtensionSpec
    """
    base = {
        "name": name,
        "depends_on": list(depends_on),
        "requires_restart": requires_restart,
        "target_scope": target_scope,
        "description": f"test extension {_random_suffix()}",
    }
    base.update(overrides)
    return ExtensionSpec(**base)


def make_registry(*specs: ExtensionSpec, default_requested: Optional[Sequence[str]] = None) -> ExtensionRegistry:
    """Registry from specs; every spec is requested by default unless told otherwise."""
    return ExtensionRegistry(specs, default_requested=default_requested)


def make_tiger_registry() -> ExtensionRegistry:
    """The PostGIS family around the TIGER geocoder."""
    return make_registry(
        make_spec("postgis"),
        make_spec("fuzzystrmatch"),
        make_spec("address_standardizer"),
        make_spec("postgis_tiger_geocoder", ["postgis", "fuzzystrmatch", "address_standardizer"]),
    )


def make_cron_registry(**cron_overrides) -> ExtensionRegistry:
    """pg_trgm plus a restart-gated, template-only pg_cron."""
    return make_registry(
        make_spec("pg_trgm"),
        make_spec(
            "pg_cron",
            requires_restart=True,
            target_scope=TargetScope.TEMPLATE_ONLY,
            **cron_overrides
        ),
    )
