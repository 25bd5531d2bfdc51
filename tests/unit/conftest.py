"""
Unit test fixtures: factory-built registries and targets.
"""

import pytest

from core.logic import build_targets
from tests.factories.model_factories import (
    make_tiger_registry,
    make_cron_registry,
)


@pytest.fixture
def tiger_registry():
    """PostGIS + TIGER geocoder registry."""
    return make_tiger_registry()


@pytest.fixture
def cron_registry():
    """Registry with a restart-gated pg_cron."""
    return make_cron_registry()


@pytest.fixture
def targets():
    """template1 plus one application database."""
    return build_targets(["app"], "template1")
