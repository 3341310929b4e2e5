from .core import NodeChangeEvent, PreferenceTree
from .discovery import DiscoveryProbe, FilesystemDiscovery, NullDiscovery
from .errors import CrossPrefsError
from .initializer import DefaultPreferenceInitializer, GateState, LifecycleGate
from .resolver import PreferenceResolver, Resolution, ResolutionReport
from .store import PreferenceStore, StoreChain
from .toolchains import (
    DEFAULT_TOOLCHAIN_NAME,
    ToolchainDefinition,
    ToolchainRegistry,
    builtin_registry,
    load_registry,
)

__all__ = [
    "CrossPrefsError",
    "DEFAULT_TOOLCHAIN_NAME",
    "DefaultPreferenceInitializer",
    "DiscoveryProbe",
    "FilesystemDiscovery",
    "GateState",
    "LifecycleGate",
    "NodeChangeEvent",
    "NullDiscovery",
    "PreferenceResolver",
    "PreferenceStore",
    "PreferenceTree",
    "Resolution",
    "ResolutionReport",
    "StoreChain",
    "ToolchainDefinition",
    "ToolchainRegistry",
    "builtin_registry",
    "load_registry",
]
