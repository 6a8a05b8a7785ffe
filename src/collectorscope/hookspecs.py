# src/collectorscope/hookspecs.py
"""pluggy hook specifications for exporter parser plugins.

Plugins implement these hooks to contribute builders to the registries.
create_registries() calls them once at startup.

Usage (implementing a plugin):
    from collectorscope.hookspecs import hookimpl

    class MyExporterPlugin:
        @hookimpl
        def collectorscope_get_port_builders(self):
            return {"myexporter": MyExporterPortParser}

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from collectorscope.protocols import AuthzBuilder, PortBuilder

PROJECT_NAME = "collectorscope"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CollectorscopeExporterSpec:
    """Hook specifications for exporter parser plugins."""

    @hookspec
    def collectorscope_get_port_builders(self) -> dict[str, "PortBuilder"]:  # type: ignore[empty-body]
        """Return port parser builders keyed by exporter type name.

        Returns:
            Mapping of exporter type (e.g. ``prometheus``) to builder
        """

    @hookspec
    def collectorscope_get_authz_builders(self) -> dict[str, "AuthzBuilder"]:  # type: ignore[empty-body]
        """Return authorization parser builders keyed by exporter type name.

        Returns:
            Mapping of exporter type (e.g. ``loadbalancing``) to builder
        """
