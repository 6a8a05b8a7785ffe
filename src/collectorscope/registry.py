# src/collectorscope/registry.py
"""Registries mapping exporter type names to parser builders.

Two independent tables exist: one for port parsers and one for authorization
parsers. An exporter type may appear in either, both, or neither.

Keys are normalized with component_type(), so ``otlp/2`` and ``otlp`` share
one builder. Normalization applies to registration, lookup and existence
checks alike.

Registries are plain objects built by the composition root (see
collectorscope.factory). Registration is expected at startup; after seal()
the table is frozen and reads need no locking.

Usage:
    registry = PortParserRegistry()
    registry.register("prometheus", PrometheusExporterParser)
    registry.seal()

    parser = registry.parser_for(logger, "prometheus/internal", {"endpoint": "0.0.0.0:9090"})
    ports = parser.ports()
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

import structlog
from structlog.stdlib import BoundLogger

from collectorscope.config_tree import ConfigTree
from collectorscope.errors import BuilderNotFoundError, RegistrySealedError
from collectorscope.protocols import AuthzBuilder, AuthzParser, ComponentPortParser, PortBuilder

logger = structlog.get_logger(__name__)

BuilderT = TypeVar("BuilderT", PortBuilder, AuthzBuilder)
ParserT = TypeVar("ParserT", ComponentPortParser, AuthzParser)


def component_type(name: str) -> str:
    """Strip the ``/instance`` qualifier from a component name.

    >>> component_type("otlp/2")
    'otlp'
    """
    return name.split("/", 1)[0]


class _BuilderRegistry(Generic[BuilderT, ParserT]):
    """Name -> builder table shared by both registry kinds."""

    kind: str = "builder"

    def __init__(self) -> None:
        self._builders: dict[str, BuilderT] = {}
        self._lock = threading.Lock()
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Freeze the registry. Further register() calls raise."""
        with self._lock:
            self._sealed = True
        logger.debug("registry_sealed", registry=self.kind, builders=len(self._builders))

    def register(self, name: str, builder: BuilderT) -> None:
        """Add or replace the builder for ``name``.

        Re-registering a name replaces the previous builder.

        Raises:
            RegistrySealedError: If the registry has been sealed
        """
        key = component_type(name)
        with self._lock:
            if self._sealed:
                raise RegistrySealedError(self.kind, name)
            replaced = key in self._builders
            self._builders[key] = builder
        logger.debug("builder_registered", registry=self.kind, component=key, replaced=replaced)

    def builder_for(self, name: str) -> BuilderT | None:
        """Return the builder for ``name`` or None if none is registered."""
        return self._builders.get(component_type(name))

    def is_registered(self, name: str) -> bool:
        return component_type(name) in self._builders

    def parser_for(
        self,
        log: BoundLogger,
        name: str,
        config: Mapping[Any, Any] | None,
    ) -> ParserT:
        """Build a parser for exporter ``name`` bound to ``config``.

        Args:
            log: Logger handed to the builder
            name: Exporter name as written in the collector config
            config: The exporter's config block (wrapped into a ConfigTree)

        Raises:
            BuilderNotFoundError: If no builder is registered for ``name``
        """
        builder = self.builder_for(name)
        if builder is None:
            raise BuilderNotFoundError(name)
        parser: ParserT = builder(log, name, ConfigTree.wrap(config))
        return parser

    def names(self) -> list[str]:
        """Registered component types, sorted."""
        return sorted(self._builders)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_registered(name)

    def __len__(self) -> int:
        return len(self._builders)

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"{type(self).__name__}({state}, {self.names()!r})"


class PortParserRegistry(_BuilderRegistry[PortBuilder, ComponentPortParser]):
    """Exporter type name -> port parser builder."""

    kind = "ports"


class AuthzParserRegistry(_BuilderRegistry[AuthzBuilder, AuthzParser]):
    """Exporter type name -> authorization parser builder."""

    kind = "authz"
