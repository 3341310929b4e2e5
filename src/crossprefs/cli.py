from __future__ import annotations

import argparse
import configparser
import json
import logging
import sys
from io import StringIO
from pathlib import Path

from .config import (
    COMMON_NAMESPACE,
    DEPRECATED_NAMESPACE,
    PLUGIN_NAMESPACE,
    current_os,
)
from .core import PreferenceTree
from .discovery import FilesystemDiscovery, NullDiscovery
from .errors import CrossPrefsError
from .initializer import DefaultPreferenceInitializer
from .namespace import normalize_namespace
from .paths import registry_file, tree_file, user_config_dir
from .toolchains import ToolchainRegistry, builtin_registry, load_registry


def _tree(args: argparse.Namespace) -> PreferenceTree:
    return PreferenceTree(args.file or tree_file())


def _registry(args: argparse.Namespace) -> ToolchainRegistry:
    path = getattr(args, "registry", None) or registry_file()
    if path is None:
        return builtin_registry()
    return load_registry(path)


def _parse_define(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key.strip(), value


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_paths(args: argparse.Namespace) -> int:
    data = {
        "user_config": user_config_dir(),
        "tree_file": args.file or tree_file(),
        "registry_file": registry_file() or "",
    }
    if args.as_json:
        print(json.dumps({k: str(v) for k, v in data.items()}))
    else:
        for k, v in data.items():
            print(f"{k}: {v}")
    return 0


def toolchains_cmd(args: argparse.Namespace) -> int:
    registry = _registry(args)
    os_name = args.os or current_os()
    rows = [
        {
            "name": tc.name,
            "default": tc.name == registry.default_name,
            "prefix": tc.prefix,
            "suffix": tc.suffix,
            "family": tc.family,
            "make": tc.make_command,
            "remove": tc.remove_command,
            "searchPath": tc.default_search_path_for_os(os_name),
        }
        for tc in registry
    ]
    if args.as_json:
        print(json.dumps(rows))
        return 0
    for row in rows:
        mark = "*" if row["default"] else " "
        print(f"{mark} {row['name']} ({row['family']}, {row['prefix']})")
    return 0


def get_cmd(args: argparse.Namespace) -> int:
    val = _tree(args).get(args.namespace, args.key)
    if not val:
        return 1
    print(val)
    return 0


def set_cmd(args: argparse.Namespace) -> int:
    tree = _tree(args)
    tree.put(args.namespace, args.key, args.value)
    tree.flush()
    return 0


def show_cmd(args: argparse.Namespace) -> int:
    data = _tree(args).snapshot()
    if args.namespace:
        wanted = normalize_namespace(args.namespace)
        data = {ns: values for ns, values in data.items() if ns == wanted}
    if args.format == "json":
        print(json.dumps(data, sort_keys=True))
        return 0
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    for ns in sorted(data):
        parser[ns] = data[ns]
    buf = StringIO()
    parser.write(buf)
    print(buf.getvalue().strip())
    return 0


def resolve_cmd(args: argparse.Namespace) -> int:
    tree = _tree(args)
    registry = _registry(args)
    os_name = args.os or current_os()
    if args.no_discovery:
        discovery = NullDiscovery()
    else:
        discovery = FilesystemDiscovery(registry=registry, os_name=os_name)
    initializer = DefaultPreferenceInitializer(
        tree,
        registry,
        discovery,
        namespace=args.plugin_id,
        common_namespace=args.common_id,
        deprecated_namespace=args.deprecated_id,
        os_name=os_name,
    )
    initializer.install_early_defaults()
    # Command line overrides are the last defaults source; merging them
    # materialises the plug-in node and releases the gate.
    tree.merge_defaults(args.plugin_id, dict(args.define or []))
    report = initializer.resolve_effective_defaults()
    tree.flush()

    if args.as_json:
        print(json.dumps(report.as_dict(), sort_keys=True))
        return 0
    bt = report.build_tools_path
    print(f"buildToolsPath: {bt.value or '-'} [{bt.source}]")
    for name, res in report.toolchains.items():
        print(f"{name}: {res.value or '-'} [{res.source}]")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser(prog: str = "crossprefs") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog, description="Resolve default ARM toolchain preferences."
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--file", type=Path, default=None, help="Preference tree file (.ini, .yaml, .toml)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_paths = subparsers.add_parser("paths", help="Show crossprefs paths.")
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=show_paths)

    p_tc = subparsers.add_parser("toolchains", help="List known toolchains.")
    p_tc.add_argument("--registry", type=Path, default=None)
    p_tc.add_argument("--os", default=None)
    p_tc.add_argument("--json", dest="as_json", action="store_true")
    p_tc.set_defaults(func=toolchains_cmd)

    p_get = subparsers.add_parser("get", help="Print the value for KEY.")
    p_get.add_argument("key")
    p_get.add_argument("--namespace", default=PLUGIN_NAMESPACE)
    p_get.set_defaults(func=get_cmd)

    p_set = subparsers.add_parser("set", help="Set KEY to VALUE; an empty VALUE unsets it.")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.add_argument("--namespace", default=PLUGIN_NAMESPACE)
    p_set.set_defaults(func=set_cmd)

    p_show = subparsers.add_parser("show", help="Show stored preferences.")
    p_show.add_argument("--namespace", default=None)
    p_show.add_argument("--as", dest="format", choices=["ini", "json"], default="ini")
    p_show.set_defaults(func=show_cmd)

    p_res = subparsers.add_parser("resolve", help="Resolve effective defaults.")
    p_res.add_argument("--registry", type=Path, default=None)
    p_res.add_argument("--os", default=None)
    p_res.add_argument("--plugin-id", default=PLUGIN_NAMESPACE)
    p_res.add_argument("--common-id", default=COMMON_NAMESPACE)
    p_res.add_argument("--deprecated-id", default=DEPRECATED_NAMESPACE)
    p_res.add_argument(
        "-D",
        "--define",
        action="append",
        type=_parse_define,
        metavar="KEY=VALUE",
        help="Override a plug-in default",
    )
    p_res.add_argument("--no-discovery", action="store_true")
    p_res.add_argument("--json", dest="as_json", action="store_true")
    p_res.set_defaults(func=resolve_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except (CrossPrefsError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
