# src/collectorscope/factory.py
"""Composition root for the parser registries.

Builds fresh PortParserRegistry and AuthzParserRegistry instances from
pluggy plugins. Callers own the returned registries and pass them to
whatever needs them; there is no module-level registry state.

Usage:
    from collectorscope.factory import create_registries

    registries = create_registries(plugins=[MyExporterPlugin()])
    parser = registries.ports.parser_for(logger, "prometheus", config)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import pluggy
import structlog

from collectorscope.errors import PluginRegistrationError
from collectorscope.exporters import BuiltinExportersPlugin
from collectorscope.hookspecs import PROJECT_NAME, CollectorscopeExporterSpec
from collectorscope.registry import AuthzParserRegistry, PortParserRegistry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Registries:
    """The two independent registries produced at startup."""

    ports: PortParserRegistry
    authz: AuthzParserRegistry


def _collect_builders(
    plugin_manager: pluggy.PluginManager,
    hook_name: str,
    register: Callable[[str, Any], None],
) -> None:
    """Call ``hook_name`` on every plugin in registration order.

    Later plugins override builders contributed by earlier ones.

    Raises:
        PluginRegistrationError: If a hook fails or returns a malformed mapping
    """
    for hook_impl in getattr(plugin_manager.hook, hook_name).get_hookimpls():
        hook_plugin: Any = hook_impl.plugin
        plugin_name = type(hook_plugin).__name__
        try:
            builders = getattr(hook_plugin, hook_name)()
        except Exception as e:
            raise PluginRegistrationError(plugin_name, f"{hook_name} raised: {e}") from e

        if not isinstance(builders, Mapping):
            raise PluginRegistrationError(
                plugin_name,
                f"{hook_name} returned {type(builders).__name__}; expected mapping of name to builder",
            )

        for name, builder in builders.items():
            if type(name) is not str:
                raise PluginRegistrationError(plugin_name, f"{hook_name} returned non-string name {name!r}")
            if not callable(builder):
                raise PluginRegistrationError(plugin_name, f"Builder for '{name}' is not callable: {builder!r}")
            register(name, builder)
            logger.debug("builder_contributed", hook=hook_name, plugin=plugin_name, component=name)


def create_registries(
    plugins: Iterable[Any] = (),
    *,
    include_builtins: bool = True,
    load_entrypoints: bool = False,
    seal: bool = True,
) -> Registries:
    """Discover builder plugins and build sealed registries.

    Args:
        plugins: Additional plugin objects implementing the collectorscope hooks
        include_builtins: Register BuiltinExportersPlugin first
        load_entrypoints: Also load plugins advertised under the
            ``collectorscope`` entry point group (registered last)
        seal: Seal both registries before returning

    Returns:
        Registries holding one port registry and one authz registry

    Raises:
        PluginRegistrationError: If a plugin fails hook validation or
            returns malformed builders
    """
    plugin_manager = pluggy.PluginManager(PROJECT_NAME)
    plugin_manager.add_hookspecs(CollectorscopeExporterSpec)

    to_register: list[Any] = [BuiltinExportersPlugin()] if include_builtins else []
    to_register.extend(plugins)
    for plugin in to_register:
        try:
            plugin_manager.register(plugin)
            plugin_manager.check_pending()
        except (pluggy.PluginValidationError, ValueError) as e:
            # PluginValidationError: hook spec mismatch (unknown hook names, bad signatures)
            # ValueError: same plugin object registered twice
            if isinstance(e, pluggy.PluginValidationError):
                plugin_manager.unregister(plugin=plugin)
            raise PluginRegistrationError(type(plugin).__name__, f"Invalid exporter plugin: {e}") from e

    if load_entrypoints:
        try:
            loaded = plugin_manager.load_setuptools_entrypoints(PROJECT_NAME)
            plugin_manager.check_pending()
        except pluggy.PluginValidationError as e:
            raise PluginRegistrationError("entrypoints", f"Invalid exporter plugin: {e}") from e
        logger.debug("entrypoint_plugins_loaded", count=loaded)

    registries = Registries(ports=PortParserRegistry(), authz=AuthzParserRegistry())
    _collect_builders(plugin_manager, "collectorscope_get_port_builders", registries.ports.register)
    _collect_builders(plugin_manager, "collectorscope_get_authz_builders", registries.authz.register)

    if seal:
        registries.ports.seal()
        registries.authz.seal()

    logger.debug(
        "registries_created",
        port_builders=registries.ports.names(),
        authz_builders=registries.authz.names(),
        sealed=seal,
    )
    return registries
