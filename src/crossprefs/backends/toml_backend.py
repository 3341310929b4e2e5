from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from ..errors import PrefsLoadError
from . import register_backend
from .base import BaseBackend, TreeData, flat_values


@register_backend
class TomlBackend(BaseBackend):
    """TOML file backend, one table per namespace.

    Keys are written quoted so dotted names stay flat.
    """

    suffixes = (".toml",)

    def load(self, path: Path) -> TreeData:
        path = Path(path)
        if not path.exists():
            return {}
        try:
            doc = tomlkit.parse(path.read_text(encoding="utf-8"))
        except (TOMLKitError, UnicodeDecodeError) as exc:
            raise PrefsLoadError(str(exc)) from exc
        data: TreeData = {}
        for namespace, table in doc.unwrap().items():
            if not isinstance(table, dict):
                raise PrefsLoadError(f"Namespace {namespace!r} must be a table")
            data[namespace] = flat_values(namespace, table)
        return data

    def save(self, path: Path, data: Mapping[str, Mapping[str, str]]) -> None:
        path = Path(path)
        doc = tomlkit.document()
        for namespace in sorted(data):
            table = tomlkit.table()
            for key, value in sorted(data[namespace].items()):
                table.add(key, str(value))
            doc.add(namespace, table)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            fh.write(tomlkit.dumps(doc))
        tmp.replace(path)
