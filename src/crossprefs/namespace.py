from __future__ import annotations

import re

_RE = re.compile(r"[-_.]+")
_VALID_RE = re.compile(r"^[a-z0-9-]+$")


def normalize_namespace(name: str) -> str:
    """Return the PEP 503 style normalised form of a namespace id.

    Plug-in ids such as ``ilg.gnumcueclipse.managedbuild.cross.arm`` become
    ``ilg-gnumcueclipse-managedbuild-cross-arm``.  Names containing path
    separators or ``..`` are rejected.
    """

    stripped = name.strip()
    norm = _RE.sub("-", stripped.lower())
    if (
        "/" in stripped
        or "\\" in stripped
        or ".." in stripped
        or not _VALID_RE.fullmatch(norm)
    ):
        raise ValueError(f"invalid namespace: {name!r}")
    return norm


def same_namespace(a: str, b: str) -> bool:
    try:
        return normalize_namespace(a) == normalize_namespace(b)
    except ValueError:
        return False
