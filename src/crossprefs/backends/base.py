from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from ..errors import PrefsLoadError

# namespace -> key -> value
TreeData = dict[str, dict[str, str]]


class BaseBackend(ABC):
    """Abstract base backend."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def load(self, path: Path) -> TreeData:
        pass

    @abstractmethod
    def save(self, path: Path, data: Mapping[str, Mapping[str, str]]) -> None:
        pass


def flat_values(namespace: str, values: Mapping[object, object]) -> dict[str, str]:
    """Convert one parsed namespace to strings; a null value means unset."""
    out: dict[str, str] = {}
    for key, value in values.items():
        if isinstance(value, (dict, list)):
            raise PrefsLoadError(
                f"Value of {namespace}/{key} must be a scalar, not {type(value).__name__}"
            )
        out[str(key)] = "" if value is None else str(value)
    return out
