"""
collectorscope: ports and RBAC rules implied by OpenTelemetry Collector exporters.

Exporter-specific parsers register under their exporter type name; the
registries dispatch each exporter config block to the right parser, which
reports the service ports it exposes or the permissions it needs.
"""

__version__ = "0.1.0"
