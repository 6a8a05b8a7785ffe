# src/collectorscope/discovery.py
"""Walk a collector config's exporters and gather ports and RBAC policies.

Each entry under ``exporters:`` is dispatched to the matching registry by
type name. Exporters without a registered builder are skipped: most exporters
open no port and need no extra permissions.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from structlog.stdlib import BoundLogger

from collectorscope.authz import DynamicRolePolicy
from collectorscope.config_tree import ConfigTree
from collectorscope.ports import ServicePort
from collectorscope.registry import AuthzParserRegistry, PortParserRegistry

EXPORTERS_KEY = "exporters"


def _exporter_blocks(logger: BoundLogger, collector_config: Mapping[Any, Any]) -> Iterator[tuple[str, ConfigTree]]:
    tree = ConfigTree.wrap(collector_config)
    if EXPORTERS_KEY not in tree:
        return
    exporters = tree.get_mapping(EXPORTERS_KEY)
    if exporters is None:
        logger.warning("exporters_section_not_a_mapping", value_type=type(tree[EXPORTERS_KEY]).__name__)
        return

    for name in exporters:
        if not isinstance(name, str):
            logger.warning("exporter_name_not_a_string", name=name)
            continue
        block = exporters.get_mapping(name)
        if block is None:
            logger.error("exporter_config_not_a_mapping", exporter=name, value_type=type(exporters[name]).__name__)
            continue
        yield name, block


def exporter_ports(
    logger: BoundLogger,
    registry: PortParserRegistry,
    collector_config: Mapping[Any, Any],
) -> list[ServicePort]:
    """Collect service ports for every exporter with a registered port parser.

    Ports are returned in document order. A port number already claimed by an
    earlier exporter is skipped with a warning.
    """
    ports: list[ServicePort] = []
    seen: set[int] = set()
    for name, block in _exporter_blocks(logger, collector_config):
        if not registry.is_registered(name):
            logger.debug("exporter_has_no_port_parser", exporter=name)
            continue
        parser = registry.parser_for(logger, name, block)
        for port in parser.ports():
            if port.port in seen:
                logger.warning("duplicate_exporter_port", exporter=name, port=port.port)
                continue
            seen.add(port.port)
            ports.append(port)
    return ports


def exporter_rbac_policies(
    logger: BoundLogger,
    registry: AuthzParserRegistry,
    collector_config: Mapping[Any, Any],
) -> list[DynamicRolePolicy]:
    """Collect RBAC policies for every exporter with a registered authz parser."""
    policies: list[DynamicRolePolicy] = []
    for name, block in _exporter_blocks(logger, collector_config):
        if not registry.is_registered(name):
            logger.debug("exporter_has_no_authz_parser", exporter=name)
            continue
        parser = registry.parser_for(logger, name, block)
        policies.extend(parser.rbac_rules())
    return policies
