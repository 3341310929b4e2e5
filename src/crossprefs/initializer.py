"""Two phase initialisation of the default preferences.

The first phase, :meth:`DefaultPreferenceInitializer.install_early_defaults`,
runs while the plug-in is loading.  Values set there may still be overridden
by plug-in ``preferences.ini`` files, product ``.ini`` files or command line
options.  The second phase, :meth:`~DefaultPreferenceInitializer.resolve_effective_defaults`,
runs once every one of those sources has been merged; it is either called
directly by the embedding application or triggered by a :class:`LifecycleGate`
when the plug-in's node appears in the default tree.
"""
from __future__ import annotations

import enum
import logging

from .config import COMMON_NAMESPACE, DEPRECATED_NAMESPACE, PLUGIN_NAMESPACE
from .core import NodeChangeEvent, PreferenceTree
from .discovery import DiscoveryProbe
from .namespace import same_namespace
from .resolver import PreferenceResolver, ResolutionReport
from .store import StoreChain
from .toolchains import ToolchainRegistry

logger = logging.getLogger(__name__)


class GateState(enum.Enum):
    WAITING = "waiting"
    DONE = "done"


class LifecycleGate:
    """Node change listener running *initializer*'s second phase once."""

    def __init__(self, initializer: DefaultPreferenceInitializer) -> None:
        self.initializer = initializer
        self.state = GateState.WAITING

    def added(self, event: NodeChangeEvent) -> None:
        logger.debug("LifecycleGate.added() %s", event.child)
        if self.state is GateState.DONE:
            return
        if not same_namespace(event.child, self.initializer.namespace):
            return
        self.state = GateState.DONE
        try:
            self.initializer.resolve_effective_defaults()
        finally:
            # We're done, de-register listener.
            event.source.remove_node_change_listener(self)

    def removed(self, event: NodeChangeEvent) -> None:
        logger.debug("LifecycleGate.removed() %s", event.child)


class DefaultPreferenceInitializer:
    def __init__(
        self,
        tree: PreferenceTree,
        registry: ToolchainRegistry,
        discovery: DiscoveryProbe,
        *,
        namespace: str = PLUGIN_NAMESPACE,
        common_namespace: str = COMMON_NAMESPACE,
        deprecated_namespace: str = DEPRECATED_NAMESPACE,
        os_name: str | None = None,
    ) -> None:
        self.tree = tree
        self.registry = registry
        self.namespace = namespace
        self.stores = StoreChain.from_tree(
            tree,
            common=common_namespace,
            current=namespace,
            deprecated=deprecated_namespace,
        )
        self.resolver = PreferenceResolver(
            self.stores, registry, discovery, os_name=os_name
        )
        self.gate: LifecycleGate | None = None
        self.report: ResolutionReport | None = None

    @property
    def resolved(self) -> bool:
        return self.report is not None

    def install_early_defaults(self, *, listen: bool = True) -> None:
        """Put the default toolchain name and wait for the plug-in node.

        With ``listen=False`` no gate is registered and the embedding
        application must call :meth:`resolve_effective_defaults` itself.
        """
        logger.debug("install_early_defaults() for %s", self.namespace)
        if not self.stores.current.get_toolchain_name():
            self.stores.current.put_toolchain_name(self.registry.default_name)
        if listen and self.gate is None:
            self.gate = LifecycleGate(self)
            self.tree.add_node_change_listener(self.gate)

    def resolve_effective_defaults(self) -> ResolutionReport:
        """Run the full resolution; later calls return the first report."""
        if self.report is not None:
            return self.report
        logger.debug("resolve_effective_defaults() for %s", self.namespace)
        self.report = self.resolver.resolve()
        return self.report
