# src/collectorscope/errors.py
"""Exceptions raised by the exporter parsing core.

Only BuilderNotFoundError is expected to reach configuration-processing
callers during a parse request. Endpoint and port problems are absorbed by
the port extractor and reported through logs instead.
"""


class CollectorscopeError(Exception):
    """Base class for all collectorscope errors."""


class BuilderNotFoundError(CollectorscopeError):
    """Raised when no parser builder is registered for a component type.

    Attributes:
        component_type: Component name as requested by the caller
    """

    def __init__(self, component_type: str) -> None:
        self.component_type = component_type
        super().__init__(f"no builders for {component_type}")


class PortParseError(CollectorscopeError):
    """Raised when an endpoint string does not yield a usable port.

    Attributes:
        endpoint: Raw endpoint value
        message: Human-readable error description
    """

    def __init__(self, endpoint: str, message: str) -> None:
        self.endpoint = endpoint
        self.message = message
        super().__init__(message)


class RegistrySealedError(CollectorscopeError):
    """Raised when registering a builder into a sealed registry."""

    def __init__(self, registry: str, component_type: str) -> None:
        self.registry = registry
        self.component_type = component_type
        super().__init__(f"Registry '{registry}' is sealed; cannot register '{component_type}'")


class PluginRegistrationError(CollectorscopeError):
    """Raised when a builder plugin is malformed or fails during discovery.

    Attributes:
        plugin: Plugin class name
        message: Human-readable error description
    """

    def __init__(self, plugin: str, message: str) -> None:
        self.plugin = plugin
        self.message = message
        super().__init__(f"Plugin '{plugin}' failed: {message}")


class CollectorConfigError(CollectorscopeError):
    """Raised when a collector configuration document cannot be used."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")
