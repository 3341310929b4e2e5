"""Backend registry and factory."""
from __future__ import annotations

from pathlib import Path

from .base import BaseBackend, TreeData

_REGISTRY: dict[str, type[BaseBackend]] = {}


def register_backend(backend: type[BaseBackend]) -> type[BaseBackend]:
    """Register a backend class and return it for decorator use."""
    for suf in backend.suffixes:
        _REGISTRY[suf] = backend
    return backend


def get_backend_for_path(path: Path) -> BaseBackend:
    backend_cls = _REGISTRY.get(Path(path).suffix.lower())
    if backend_cls is None:
        raise ValueError(f"No backend for {Path(path).suffix}")
    return backend_cls()


def supported_suffixes() -> list[str]:
    return sorted(_REGISTRY)


# register default backends
from . import ini_backend, toml_backend, yaml_backend  # noqa: F401,E402

__all__ = [
    "BaseBackend",
    "TreeData",
    "get_backend_for_path",
    "register_backend",
    "supported_suffixes",
]
