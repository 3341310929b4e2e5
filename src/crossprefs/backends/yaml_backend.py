from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml

from ..errors import PrefsLoadError
from . import register_backend
from .base import BaseBackend, TreeData, flat_values


@register_backend
class YamlBackend(BaseBackend):
    """YAML file backend.

    The document root maps namespaces to flat ``key: value`` mappings.
    """

    suffixes = (".yaml", ".yml")

    def load(self, path: Path) -> TreeData:
        path = Path(path)
        if not path.exists():
            return {}
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PrefsLoadError(f"{path}: {exc}") from exc
        if raw.strip() == "":
            return {}
        try:
            doc = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise PrefsLoadError(str(exc)) from exc
        if not isinstance(doc, dict):
            raise PrefsLoadError("Root of YAML prefs must be a mapping")
        data: TreeData = {}
        for namespace, values in doc.items():
            if not isinstance(values, dict):
                raise PrefsLoadError(f"Namespace {namespace!r} must be a mapping")
            data[str(namespace)] = flat_values(str(namespace), values)
        return data

    def save(self, path: Path, data: Mapping[str, Mapping[str, str]]) -> None:
        path = Path(path)
        doc = {ns: dict(values) for ns, values in data.items()}
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            yaml.safe_dump(doc, fh, sort_keys=True, allow_unicode=True)
        tmp.replace(path)
