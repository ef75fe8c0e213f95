# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Cache isolation:
    Contracts are cached per (resolver class, type). Tests that need a cold
    cache use the ``isolated_resolver_class`` fixture, which returns a fresh
    DefaultContractResolver subclass, so no earlier test can have populated
    its entries, even in the shared cache.
"""

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from jsoncontract.core.config import ResolverSettings
from jsoncontract.engine.resolver import DefaultContractResolver

# =============================================================================
# Hypothesis profiles
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def isolated_resolver_class() -> type[DefaultContractResolver]:
    """A DefaultContractResolver subclass no other test has used."""
    return type("IsolatedResolver", (DefaultContractResolver,), {})


@pytest.fixture
def resolver() -> DefaultContractResolver:
    """Resolver with default settings and a private cache."""
    return DefaultContractResolver(ResolverSettings())


@pytest.fixture
def non_public_resolver() -> DefaultContractResolver:
    return DefaultContractResolver(ResolverSettings(non_public_members=True))


@pytest.fixture
def reset_structlog() -> Iterator[None]:
    """Restore structlog defaults and root handlers after a test reconfigures logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)
