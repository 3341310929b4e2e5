from __future__ import annotations

import configparser
from pathlib import Path


class IniIOError(Exception):
    """Raised when an INI file cannot be read or written."""


def _parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        strict=False, interpolation=None, delimiters=("=",)
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


# Returns mapping: section -> mapping(key -> value)
def read_sections(path: Path) -> dict[str, dict[str, str]]:
    parser = _parser()
    data: dict[str, dict[str, str]] = {}
    if path.exists():
        try:
            parser.read(path, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError) as exc:
            raise IniIOError(str(exc)) from exc
        for section in parser.sections():
            data[section] = dict(parser.items(section))
    return data

