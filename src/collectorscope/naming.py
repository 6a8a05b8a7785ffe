"""Kubernetes-safe names for service ports."""

import re

# DNS-1035 label: lowercase alphanumerics and '-', starting with a letter.
_DNS_1035_LABEL = re.compile(r"[a-z]([-a-z0-9]*[a-z0-9])?")
_DNS_1035_MAX_LENGTH = 63


def port_name(exporter_name: str, port: int) -> str:
    """Return the service port name for an exporter listening on ``port``.

    The exporter name is used directly when it can be made into a DNS-1035
    label by replacing '/' and '_' with '-'. Otherwise the name falls back
    to ``port-<port>``.
    """
    candidate = exporter_name.replace("/", "-").replace("_", "-")
    if len(candidate) > _DNS_1035_MAX_LENGTH or not _DNS_1035_LABEL.fullmatch(candidate):
        return f"port-{port}"
    return candidate
