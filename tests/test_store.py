from __future__ import annotations

import pytest

from crossprefs.core import PreferenceTree
from crossprefs.store import (
    BUILD_TOOLS_PATH,
    StoreChain,
    toolchain_path_key,
    toolchain_search_path_key,
    toolchain_search_path_os_key,
)


def test_keys_layout() -> None:
    assert toolchain_path_key("foo") == "toolchain.foo.path"
    assert toolchain_search_path_key("foo") == "toolchain.foo.searchPath"
    assert toolchain_search_path_os_key("foo", "linux") == "toolchain.foo.searchPath.linux"


def test_typed_helpers_round_through_tree() -> None:
    tree = PreferenceTree()
    store = tree.node("plugin")

    assert store.is_empty()
    store.put_build_tools_path("/bt")
    store.put_toolchain_name("foo")
    store.put_toolchain_path("foo", "/foo/bin")
    store.put_toolchain_search_path("foo", "/foo")

    assert tree.get("plugin", BUILD_TOOLS_PATH) == "/bt"
    assert store.get_toolchain_name() == "foo"
    assert store.get_toolchain_path("foo") == "/foo/bin"
    assert store.get_toolchain_search_path("foo") == "/foo"
    assert store.get_toolchain_search_path_os("foo", "linux") == ""
    assert store.keys() == [
        "buildToolsPath",
        "toolchain.foo.path",
        "toolchain.foo.searchPath",
        "toolchain.name",
    ]
    assert not store.is_empty()


def test_handles_share_state() -> None:
    tree = PreferenceTree()
    tree.node("plugin").put("k", "v")
    assert tree.node("plugin").as_dict() == {"k": "v"}
    tree.node("plugin").remove("k")
    assert tree.node("plugin").get("k") == ""


def test_chain_order() -> None:
    tree = PreferenceTree()
    chain = StoreChain.from_tree(tree, common="c", current="p", deprecated="d")
    assert [s.namespace for s in chain] == ["c", "p", "d"]
    assert [name for name, _ in chain.precedence()] == ["common", "current", "deprecated"]


def test_chain_from_list() -> None:
    tree = PreferenceTree()
    stores = [tree.node("c"), tree.node("p"), tree.node("d")]
    assert StoreChain.from_list(stores).deprecated.namespace == "d"
    with pytest.raises(ValueError):
        StoreChain.from_list(stores[:2])
