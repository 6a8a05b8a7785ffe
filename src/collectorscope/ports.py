# src/collectorscope/ports.py
"""Port extraction from exporter configuration blocks.

Exporters describe where they listen (or connect) through a free-form
``endpoint`` value, typically ``host:port``. The helpers here derive a single
service port from that value. A missing or malformed endpoint never raises:
it is logged and treated as "no port to report", so one broken exporter block
cannot stop the rest of a collector configuration from being processed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from structlog.stdlib import BoundLogger

from collectorscope.config_tree import ConfigTree
from collectorscope.errors import PortParseError
from collectorscope.naming import port_name
from collectorscope.sentinels import MISSING, MissingSentinel

ENDPOINT_KEY = "endpoint"

MIN_PORT = 1
MAX_PORT = 65535

_INT32_MAX = 2**31 - 1
_DIGITS = frozenset("0123456789")

PortNamer = Callable[[str, int], str]


@dataclass(frozen=True, slots=True)
class ServicePort:
    """A port an exporter exposes, ready to become a Service port entry.

    Construction does not range-check ``port``; call validate() before
    handing a hand-built descriptor to manifest generation.
    """

    name: str
    port: int
    target_port: int | None = None
    protocol: str = "TCP"

    def validate(self) -> None:
        """Raise ValueError if the port is outside [1, 65535]."""
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ValueError(f"Port {self.port} for '{self.name}' is outside {MIN_PORT}-{MAX_PORT}")


def address_from_config(
    logger: BoundLogger,
    exporter_name: str,
    key: str,
    config: ConfigTree,
) -> Any | MissingSentinel:
    """Look up ``key`` in an exporter's config block.

    A missing key is expected for many exporters, so it is only logged at
    debug level.

    Returns:
        The raw value, or MISSING when the key is absent.
    """
    value = config.lookup(key)
    if value is MISSING:
        logger.debug("exporter_key_missing", exporter=exporter_name, key=key)
    return value


def single_port_from_endpoint(
    logger: BoundLogger,
    exporter_name: str,
    config: ConfigTree,
    *,
    namer: PortNamer = port_name,
) -> ServicePort | None:
    """Derive the exporter's primary service port from its ``endpoint``.

    Args:
        logger: Structured logger for diagnostics
        exporter_name: Exporter name as written in the collector config
            (e.g. ``otlp/2``); used to name the port
        config: The exporter's own configuration block
        namer: Port naming function

    Returns:
        ServicePort, or None if no usable port could be determined.
    """
    endpoint = address_from_config(logger, exporter_name, ENDPOINT_KEY, config)

    if endpoint is MISSING or endpoint is None:
        return None

    if not isinstance(endpoint, str):
        logger.error(
            "endpoint_not_a_string",
            exporter=exporter_name,
            endpoint=endpoint,
            error=f"unrecognized type {type(endpoint).__name__}",
        )
        return None

    try:
        port = port_from_endpoint(endpoint)
    except PortParseError as e:
        logger.error(
            "endpoint_port_unparseable",
            exporter=exporter_name,
            endpoint=endpoint,
            error=str(e),
        )
        return None

    if port > MAX_PORT:
        logger.error(
            "endpoint_port_out_of_range",
            exporter=exporter_name,
            endpoint=endpoint,
            port=port,
        )
        return None

    return ServicePort(name=namer(exporter_name, port), port=port)


def port_from_endpoint(endpoint: str) -> int:
    """Extract the port from an endpoint string such as ``0.0.0.0:4317``.

    Scans left to right for the first ':' followed by one or more ASCII
    digits and parses that digit run. When the string holds several such
    runs the first one wins, so ``[::1]:4317`` yields 1.

    Raises:
        PortParseError: If no ``:digits`` run exists, the value is zero, or
            it does not fit in a signed 32-bit integer.
    """
    digits = _first_colon_digit_run(endpoint)
    if digits is None:
        raise PortParseError(endpoint, "port should not be empty")

    # int() refuses very long digit strings, so reject those before converting.
    significant = digits.lstrip("0")
    if len(significant) > len(str(_INT32_MAX)) or int(significant or "0", 10) > _INT32_MAX:
        raise PortParseError(endpoint, f"port {digits} is out of range for int32")
    port = int(significant or "0", 10)
    if port == 0:
        raise PortParseError(endpoint, "port should not be empty")
    return port


def _first_colon_digit_run(endpoint: str) -> str | None:
    length = len(endpoint)
    for index, char in enumerate(endpoint):
        if char != ":":
            continue
        end = index + 1
        while end < length and endpoint[end] in _DIGITS:
            end += 1
        if end > index + 1:
            return endpoint[index + 1 : end]
    return None
