# src/collectorscope/exporters/loadbalancing.py
"""Authorization parser for the loadbalancing exporter.

With the Kubernetes resolver the exporter watches the backing Service's
endpoints to discover backends, which requires read access to endpoints and
endpointslices. Static and DNS resolvers need no extra permissions.

Example configuration:
    exporters:
      loadbalancing:
        resolver:
          k8s:
            service: otel-backends.observability
"""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from collectorscope.authz import DynamicRolePolicy, PolicyRule
from collectorscope.config_tree import ConfigTree

PARSER_NAME = "__loadbalancing"

_WATCH_VERBS = ("get", "list", "watch")

K8S_RESOLVER_RULES = (
    PolicyRule(api_groups=("",), resources=("endpoints",), verbs=_WATCH_VERBS),
    PolicyRule(api_groups=("discovery.k8s.io",), resources=("endpointslices",), verbs=_WATCH_VERBS),
)


class LoadBalancingExporterParser:
    """Reports the RBAC rules the loadbalancing exporter's resolver needs."""

    def __init__(self, logger: BoundLogger, name: str, config: ConfigTree) -> None:
        self._logger = logger
        self._name = name
        self._config = config

    def parser_name(self) -> str:
        return PARSER_NAME

    def rbac_rules(self) -> list[DynamicRolePolicy]:
        resolver = self._config.get_mapping("resolver")
        if resolver is None:
            self._logger.debug("exporter_key_missing", exporter=self._name, key="resolver")
            return []

        k8s = resolver.get_mapping("k8s")
        if k8s is None:
            return []

        return [DynamicRolePolicy(rules=K8S_RESOLVER_RULES, namespaces=self._namespaces(k8s))]

    def _namespaces(self, k8s: ConfigTree) -> tuple[str, ...]:
        # "name.namespace" scopes the watch to one namespace; a bare name is
        # resolved in the collector's own namespace, which is not known here.
        service = k8s.get_string("service")
        if service is None or "." not in service:
            return ()
        namespace = service.split(".", 2)[1]
        if not namespace:
            return ()
        return (namespace,)
