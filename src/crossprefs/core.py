from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import Protocol

from .backends import get_backend_for_path
from .errors import PrefsWriteError, UnknownNamespaceError
from .namespace import normalize_namespace
from .store import PreferenceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeChangeEvent:
    """Notification that *child* was added to or removed from *source*."""

    source: PreferenceTree
    child: str


class NodeChangeListener(Protocol):
    def added(self, event: NodeChangeEvent) -> None: ...

    def removed(self, event: NodeChangeEvent) -> None: ...


class PreferenceTree:
    """The shared tree of default preferences.

    Values live in one node per namespace.  Writing a value creates the
    node's storage silently; a node only becomes *materialised*, and
    listeners are only told about it, once :meth:`merge_defaults` or
    :meth:`add_node` is called for it.  When *path* is given, the tree is
    loaded from and flushed to that file through the backend matching its
    suffix.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self._lock = RLock()
        self._nodes: dict[str, dict[str, str]] = {}
        self._materialised: set[str] = set()
        self._listeners: list[NodeChangeListener] = []
        if self.path is not None:
            self.reload()

    def __repr__(self) -> str:
        return f"PreferenceTree({str(self.path) if self.path else 'memory'})"

    # ----- persistence -----

    def reload(self) -> None:
        """Replace the in-memory contents with what is stored on disk."""
        if self.path is None:
            return
        backend = get_backend_for_path(self.path)
        with self._lock:
            self._nodes.clear()
            for namespace, values in backend.load(self.path).items():
                ns = normalize_namespace(namespace)
                self._nodes.setdefault(ns, {}).update(
                    {k: v for k, v in values.items() if v != ""}
                )
            # Stored values are kept, but nodes are announced again each session.
            self._materialised.clear()
            logger.debug("Loaded %d namespaces from %s", len(self._nodes), self.path)

    def flush(self) -> None:
        if self.path is None:
            return
        backend = get_backend_for_path(self.path)
        with self._lock:
            data = {ns: dict(values) for ns, values in self._nodes.items() if values}
            try:
                backend.save(self.path, data)
            except OSError as exc:
                raise PrefsWriteError(f"cannot write {self.path}: {exc}") from exc
        logger.debug("Flushed %d namespaces to %s", len(data), self.path)

    # ----- values -----

    def node(self, namespace: str) -> PreferenceStore:
        return PreferenceStore(self, normalize_namespace(namespace))

    def get(self, namespace: str, key: str) -> str:
        ns = normalize_namespace(namespace)
        with self._lock:
            return self._nodes.get(ns, {}).get(key, "")

    def put(self, namespace: str, key: str, value: str) -> None:
        ns = normalize_namespace(namespace)
        value = "" if value is None else str(value)
        with self._lock:
            if value == "":
                self._nodes.get(ns, {}).pop(key, None)
                return
            self._nodes.setdefault(ns, {})[key] = value
        logger.debug("put %s/%s = %s", ns, key, value)

    def remove(self, namespace: str, key: str) -> None:
        self.put(namespace, key, "")

    def values(self, namespace: str) -> dict[str, str]:
        ns = normalize_namespace(namespace)
        with self._lock:
            return dict(self._nodes.get(ns, {}))

    def namespaces(self) -> list[str]:
        with self._lock:
            return sorted(ns for ns, values in self._nodes.items() if values)

    def snapshot(self) -> dict[str, dict[str, str]]:
        """Return a deep copy of every non-empty namespace."""
        with self._lock:
            return {ns: dict(v) for ns, v in self._nodes.items() if v}

    # ----- structure and notifications -----

    def has_node(self, namespace: str) -> bool:
        ns = normalize_namespace(namespace)
        with self._lock:
            return ns in self._materialised

    def add_node(self, namespace: str) -> PreferenceStore:
        """Materialise *namespace*, notifying listeners the first time."""
        ns = normalize_namespace(namespace)
        with self._lock:
            self._nodes.setdefault(ns, {})
            fresh = ns not in self._materialised
            self._materialised.add(ns)
        if fresh:
            self._fire("added", ns)
        return PreferenceStore(self, ns)

    def remove_node(self, namespace: str) -> None:
        ns = normalize_namespace(namespace)
        with self._lock:
            if ns not in self._materialised and ns not in self._nodes:
                raise UnknownNamespaceError(namespace)
            self._nodes.pop(ns, None)
            self._materialised.discard(ns)
        self._fire("removed", ns)

    def merge_defaults(
        self, namespace: str, *sources: Mapping[str, str]
    ) -> PreferenceStore:
        """Merge default *sources* into *namespace* and materialise it.

        Sources are applied in order, so plug-in defaults should come first,
        then product files, then command line overrides.  Listeners see the
        node only after every source has been merged.
        """
        ns = normalize_namespace(namespace)
        with self._lock:
            for source in sources:
                for key, value in source.items():
                    self.put(ns, key, value)
        return self.add_node(ns)

    def add_node_change_listener(self, listener: NodeChangeListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_node_change_listener(self, listener: NodeChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def listeners(self) -> list[NodeChangeListener]:
        with self._lock:
            return list(self._listeners)

    def _fire(self, kind: str, namespace: str) -> None:
        event = NodeChangeEvent(self, namespace)
        # Listeners may unregister themselves while being notified.
        for listener in self.listeners():
            getattr(listener, kind)(event)
