# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- log: structlog logger to hand to parsers and registries
- collector_config_file: writes a collector config YAML to tmp_path

Test doubles:
- FixedPortParser: port parser reporting the endpoint's single port
- StaticAuthzParser: authz parser returning a fixed policy list
- OtlpPluginStub: plugin registering FixedPortParser as "otlp"

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings
from structlog.stdlib import BoundLogger

from collectorscope.authz import DynamicRolePolicy
from collectorscope.config_tree import ConfigTree
from collectorscope.hookspecs import hookimpl
from collectorscope.ports import ServicePort, single_port_from_endpoint

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo configure_logging() between tests so capture_logs sees defaults."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def log() -> BoundLogger:
    logger: BoundLogger = structlog.get_logger("tests")
    return logger


@pytest.fixture
def collector_config_file(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes YAML text to a collector config file."""

    def _write(text: str) -> Path:
        path = tmp_path / "collector.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Test Doubles
# =============================================================================


class FixedPortParser:
    """Port parser that reports the single port from ``endpoint``."""

    def __init__(self, logger: BoundLogger, name: str, config: ConfigTree) -> None:
        self.logger = logger
        self.name = name
        self.config = config

    def parser_name(self) -> str:
        return "__fixed"

    def ports(self) -> list[ServicePort]:
        port = single_port_from_endpoint(self.logger, self.name, self.config)
        return [] if port is None else [port]


class StaticAuthzParser:
    """Authz parser that returns the policies it was given."""

    policies: list[DynamicRolePolicy] = []

    def __init__(self, logger: BoundLogger, name: str, config: ConfigTree) -> None:
        self.name = name
        self.config = config

    def parser_name(self) -> str:
        return "__static"

    def rbac_rules(self) -> list[DynamicRolePolicy]:
        return list(self.policies)


class OtlpPluginStub:
    """Plugin contributing FixedPortParser for the otlp exporter."""

    @hookimpl
    def collectorscope_get_port_builders(self) -> dict[str, Callable[..., FixedPortParser]]:
        return {"otlp": FixedPortParser}
