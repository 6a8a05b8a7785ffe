# src/collectorscope/protocols.py
"""Protocol definitions for exporter parsers and their builders.

A builder is a plain callable registered under an exporter type name. The
registry calls it with a logger, the exporter name as written in the
collector config, and that exporter's config block; it returns a parser bound
to that block.

Builders must not fail: constructing a parser is pure construction, and any
problem with the config content is reported by the parser's own methods.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

from structlog.stdlib import BoundLogger

from collectorscope.config_tree import ConfigTree

if TYPE_CHECKING:
    from collectorscope.authz import DynamicRolePolicy
    from collectorscope.ports import ServicePort


@runtime_checkable
class ComponentPortParser(Protocol):
    """Reports the service ports an exporter's configuration implies."""

    def parser_name(self) -> str:
        """Name of the parser implementation (e.g. ``__prometheus``)."""
        ...

    def ports(self) -> list["ServicePort"]:
        """Return zero or more ports.

        Malformed endpoints are logged and skipped, never raised.
        """
        ...


@runtime_checkable
class AuthzParser(Protocol):
    """Reports the RBAC policies an exporter's configuration implies."""

    def parser_name(self) -> str:
        """Name of the parser implementation."""
        ...

    def rbac_rules(self) -> list["DynamicRolePolicy"]:
        """Return zero or more role policies."""
        ...


PortBuilder: TypeAlias = Callable[[BoundLogger, str, ConfigTree], ComponentPortParser]
AuthzBuilder: TypeAlias = Callable[[BoundLogger, str, ConfigTree], AuthzParser]
