"""Resolve effective default preferences across layered stores.

Three stores take part, in read precedence order: the *common* store shared
by the sibling plug-ins, the *current* plug-in store and the *deprecated*
store of the plug-in's former id.  Values found in a lower store are copied
forward so the next resolution stops at the first lookup.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import current_os
from .discovery import DiscoveryProbe
from .store import StoreChain
from .toolchains import ToolchainDefinition, ToolchainRegistry

logger = logging.getLogger(__name__)

SOURCE_COMMON = "common"
SOURCE_CURRENT = "current"
SOURCE_DEPRECATED = "deprecated"
SOURCE_DISCOVERED = "discovered"
SOURCE_UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Resolution:
    value: str
    source: str

    @property
    def resolved(self) -> bool:
        return self.value != ""


@dataclass
class ResolutionReport:
    """Outcome of one run, mainly for logging and the command line."""

    build_tools_path: Resolution = Resolution("", SOURCE_UNRESOLVED)
    toolchains: dict[str, Resolution] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        return {
            "buildToolsPath": {
                "value": self.build_tools_path.value,
                "source": self.build_tools_path.source,
            },
            "toolchains": {
                name: {"value": r.value, "source": r.source}
                for name, r in self.toolchains.items()
            },
        }


class PreferenceResolver:
    def __init__(
        self,
        stores: StoreChain,
        registry: ToolchainRegistry,
        discovery: DiscoveryProbe,
        *,
        os_name: str | None = None,
    ) -> None:
        self.stores = stores
        self.registry = registry
        self.discovery = discovery
        self.os_name = os_name or current_os()

    def resolve(self) -> ResolutionReport:
        """Resolve the build tools path, then every toolchain path."""
        report = ResolutionReport()
        report.build_tools_path = self.resolve_build_tools_path()
        report.toolchains = self.resolve_toolchain_paths()
        return report

    # ----- build tools -----

    def resolve_build_tools_path(self) -> Resolution:
        common = self.stores.common
        value = common.get_build_tools_path()
        if value:
            logger.debug("Build tools path already in common store: %s", value)
            return Resolution(value, SOURCE_COMMON)

        source = SOURCE_UNRESOLVED
        for name, store in self.stores.precedence()[1:]:
            value = store.get_build_tools_path()
            if value:
                source = name
                break
        else:
            value = self._probe_build_tools()
            if value:
                source = SOURCE_DISCOVERED

        if value:
            # Copy from the old store, or record the discovered value.
            common.put_build_tools_path(value)
            logger.debug("Build tools path %s taken from %s", value, source)
        else:
            logger.debug("Build tools path not found")
        return Resolution(value, source)

    def _probe_build_tools(self) -> str:
        try:
            return self.discovery.discover_build_tools_path() or ""
        except OSError as exc:
            logger.warning("Build tools discovery failed: %s", exc)
            return ""

    # ----- toolchains -----

    def resolve_toolchain_paths(self) -> dict[str, Resolution]:
        results: dict[str, Resolution] = {}
        for toolchain in self.registry.list():
            results[toolchain.name] = self.resolve_toolchain_path(toolchain)
        return results

    def resolve_toolchain_path(self, toolchain: ToolchainDefinition) -> Resolution:
        name = toolchain.name
        current = self.stores.current

        path = current.get_toolchain_path(name)
        if path:
            return Resolution(path, SOURCE_CURRENT)

        path = self.stores.deprecated.get_toolchain_path(name)
        if path:
            current.put_toolchain_path(name, path)
            logger.debug("Toolchain %s path %s copied from deprecated store", name, path)
            return Resolution(path, SOURCE_DEPRECATED)

        search_path = self.search_path_for(toolchain)
        if not search_path:
            logger.debug("Toolchain %s has no search path", name)
            return Resolution("", SOURCE_UNRESOLVED)

        path = self._probe_toolchain(name, search_path)
        if not path:
            return Resolution("", SOURCE_UNRESOLVED)
        current.put_toolchain_path(name, path)
        logger.debug("Toolchain %s discovered at %s", name, path)
        return Resolution(path, SOURCE_DISCOVERED)

    def search_path_for(self, toolchain: ToolchainDefinition) -> str:
        """Return the search path of *toolchain*, seeding it when missing.

        An OS specific value merged into the current store by a defaults
        source wins over the value built into the registry.
        """
        name = toolchain.name
        current = self.stores.current
        search_path = current.get_toolchain_search_path(name)
        if search_path:
            return search_path
        search_path = current.get_toolchain_search_path_os(
            name, self.os_name
        ) or toolchain.default_search_path_for_os(self.os_name)
        if search_path:
            current.put_toolchain_search_path(name, search_path)
        return search_path

    def _probe_toolchain(self, name: str, search_path: str) -> str:
        try:
            return self.discovery.discover_toolchain_path(name, search_path) or ""
        except OSError as exc:
            logger.warning("Discovery of toolchain %s failed: %s", name, exc)
            return ""
