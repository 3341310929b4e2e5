from __future__ import annotations

import configparser
from collections.abc import Mapping
from pathlib import Path

from ..errors import PrefsLoadError
from . import register_backend
from .base import BaseBackend, TreeData


def _parser() -> configparser.ConfigParser:
    # Keys carry toolchain names, which are case sensitive and may hold '%'.
    parser = configparser.ConfigParser(interpolation=None, delimiters=("=",))
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


@register_backend
class IniBackend(BaseBackend):
    suffixes = (".ini",)

    def load(self, path: Path) -> TreeData:
        parser = _parser()
        if path.exists():
            try:
                parser.read(path, encoding="utf-8")
            except (configparser.Error, UnicodeDecodeError) as exc:
                raise PrefsLoadError(str(exc)) from exc
        data: TreeData = {}
        for section in parser.sections():
            data[section] = dict(parser.items(section))
        return data

    def save(self, path: Path, data: Mapping[str, Mapping[str, str]]) -> None:
        parser = _parser()
        for section in sorted(data):
            parser.add_section(section)
            for key, value in sorted(data[section].items()):
                parser.set(section, key, str(value))
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            parser.write(f)
        tmp.replace(path)
