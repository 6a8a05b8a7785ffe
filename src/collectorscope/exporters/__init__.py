# src/collectorscope/exporters/__init__.py
"""Built-in exporter parsers.

Available parsers:
- PrometheusExporterParser: service port of the prometheus scrape endpoint
- LoadBalancingExporterParser: RBAC rules for the Kubernetes resolver

Plugin registration:
    Parsers are contributed via the collectorscope_get_*_builders hooks.
    BuiltinExportersPlugin in this module provides all built-in parsers.
"""

from collectorscope.exporters.loadbalancing import LoadBalancingExporterParser
from collectorscope.exporters.prometheus import PrometheusExporterParser
from collectorscope.hookspecs import hookimpl
from collectorscope.protocols import AuthzBuilder, PortBuilder


class BuiltinExportersPlugin:
    """Plugin that registers built-in exporter parsers."""

    @hookimpl
    def collectorscope_get_port_builders(self) -> dict[str, PortBuilder]:
        return {"prometheus": PrometheusExporterParser}

    @hookimpl
    def collectorscope_get_authz_builders(self) -> dict[str, AuthzBuilder]:
        return {"loadbalancing": LoadBalancingExporterParser}


__all__ = [
    "BuiltinExportersPlugin",
    "LoadBalancingExporterParser",
    "PrometheusExporterParser",
]
