"""Namespace scoped handles over the shared preference tree."""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .core import PreferenceTree

BUILD_TOOLS_PATH = "buildToolsPath"
TOOLCHAIN_NAME = "toolchain.name"


def toolchain_path_key(name: str) -> str:
    return f"toolchain.{name}.path"


def toolchain_search_path_key(name: str) -> str:
    return f"toolchain.{name}.searchPath"


def toolchain_search_path_os_key(name: str, os_name: str) -> str:
    return f"toolchain.{name}.searchPath.{os_name}"


class PreferenceStore:
    """String valued preferences of one namespace.

    The handle is cheap to create and holds no state of its own; every read
    and write goes to the backing :class:`~crossprefs.core.PreferenceTree`.
    An empty string means *unset*, ``None`` is never returned.
    """

    def __init__(self, tree: PreferenceTree, namespace: str) -> None:
        self._tree = tree
        self.namespace = namespace

    def __repr__(self) -> str:
        return f"PreferenceStore({self.namespace!r})"

    def get(self, key: str) -> str:
        return self._tree.get(self.namespace, key)

    def put(self, key: str, value: str) -> None:
        self._tree.put(self.namespace, key, value)

    def remove(self, key: str) -> None:
        self._tree.remove(self.namespace, key)

    def keys(self) -> list[str]:
        return sorted(self._tree.values(self.namespace))

    def as_dict(self) -> dict[str, str]:
        return dict(self._tree.values(self.namespace))

    def is_empty(self) -> bool:
        return not self._tree.values(self.namespace)

    # ----- typed helpers -----

    def get_build_tools_path(self) -> str:
        return self.get(BUILD_TOOLS_PATH)

    def put_build_tools_path(self, value: str) -> None:
        self.put(BUILD_TOOLS_PATH, value)

    def get_toolchain_name(self) -> str:
        return self.get(TOOLCHAIN_NAME)

    def put_toolchain_name(self, name: str) -> None:
        self.put(TOOLCHAIN_NAME, name)

    def get_toolchain_path(self, name: str) -> str:
        return self.get(toolchain_path_key(name))

    def put_toolchain_path(self, name: str, value: str) -> None:
        self.put(toolchain_path_key(name), value)

    def get_toolchain_search_path(self, name: str) -> str:
        return self.get(toolchain_search_path_key(name))

    def put_toolchain_search_path(self, name: str, value: str) -> None:
        self.put(toolchain_search_path_key(name), value)

    def get_toolchain_search_path_os(self, name: str, os_name: str) -> str:
        """Return the OS specific search path supplied by a defaults source."""
        return self.get(toolchain_search_path_os_key(name, os_name))


@dataclass(frozen=True)
class StoreChain:
    """The three stores taking part in resolution, highest precedence first."""

    common: PreferenceStore
    current: PreferenceStore
    deprecated: PreferenceStore

    @classmethod
    def from_tree(
        cls,
        tree: PreferenceTree,
        *,
        common: str,
        current: str,
        deprecated: str,
    ) -> StoreChain:
        return cls(tree.node(common), tree.node(current), tree.node(deprecated))

    @classmethod
    def from_list(cls, stores: Sequence[PreferenceStore]) -> StoreChain:
        """Build a chain from stores ordered highest precedence first."""
        if len(stores) != 3:
            raise ValueError("expected common, current and deprecated stores")
        return cls(*stores)

    def __iter__(self) -> Iterator[PreferenceStore]:
        yield self.common
        yield self.current
        yield self.deprecated

    def precedence(self) -> tuple[tuple[str, PreferenceStore], ...]:
        return (
            ("common", self.common),
            ("current", self.current),
            ("deprecated", self.deprecated),
        )
