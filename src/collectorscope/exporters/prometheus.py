# src/collectorscope/exporters/prometheus.py
"""Port parser for the prometheus exporter.

The prometheus exporter serves a scrape endpoint, so its ``endpoint`` is a
listening address. An exporter declared with an empty block listens on the
default port.

Example configuration:
    exporters:
      prometheus:
        endpoint: "0.0.0.0:9090"
"""

from __future__ import annotations

from structlog.stdlib import BoundLogger

from collectorscope.config_tree import ConfigTree
from collectorscope.naming import port_name
from collectorscope.ports import PortNamer, ServicePort, single_port_from_endpoint

PARSER_NAME = "__prometheus"
DEFAULT_PROMETHEUS_PORT = 8888


class PrometheusExporterParser:
    """Reports the scrape port of a prometheus exporter."""

    def __init__(
        self,
        logger: BoundLogger,
        name: str,
        config: ConfigTree,
        *,
        namer: PortNamer = port_name,
    ) -> None:
        self._logger = logger
        self._name = name
        self._config = config
        self._namer = namer

    def parser_name(self) -> str:
        return PARSER_NAME

    def ports(self) -> list[ServicePort]:
        if not self._config:
            return [
                ServicePort(
                    name=self._namer(self._name, DEFAULT_PROMETHEUS_PORT),
                    port=DEFAULT_PROMETHEUS_PORT,
                    target_port=DEFAULT_PROMETHEUS_PORT,
                )
            ]

        port = single_port_from_endpoint(self._logger, self._name, self._config, namer=self._namer)
        if port is None:
            return []
        return [port]
