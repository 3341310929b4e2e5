from __future__ import annotations

from crossprefs.core import PreferenceTree
from crossprefs.store import StoreChain
from crossprefs.toolchains import ToolchainDefinition, ToolchainRegistry


class FakeDiscovery:
    """Deterministic probe counting how often it is asked."""

    def __init__(
        self,
        build_tools: str = "",
        toolchains: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self.build_tools = build_tools
        self.toolchains = toolchains or {}
        self.build_tools_calls = 0
        self.toolchain_calls: list[tuple[str, str]] = []

    @property
    def calls(self) -> int:
        return self.build_tools_calls + len(self.toolchain_calls)

    def discover_build_tools_path(self) -> str:
        self.build_tools_calls += 1
        return self.build_tools

    def discover_toolchain_path(self, name: str, search_path: str) -> str:
        self.toolchain_calls.append((name, search_path))
        return self.toolchains.get((name, search_path), "")


def make_registry(*definitions: ToolchainDefinition) -> ToolchainRegistry:
    return ToolchainRegistry(definitions, default_name=definitions[0].name)


def make_chain(tree: PreferenceTree) -> StoreChain:
    return StoreChain.from_tree(
        tree, common="common", current="current", deprecated="deprecated"
    )
