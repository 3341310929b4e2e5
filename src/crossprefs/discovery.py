"""Locate installed build tools and toolchains.

Discovery is injected into the resolver as an object implementing
:class:`DiscoveryProbe`.  Probes never raise for missing or unreadable
folders; they return an empty string instead.
"""
from __future__ import annotations

import glob
import logging
import os
import re
from pathlib import Path
from typing import Protocol

from .config import OS_WIN32, current_os
from .errors import UnknownToolchainError
from .toolchains import ToolchainRegistry, builtin_registry

logger = logging.getLogger(__name__)

_BUILD_TOOLS_SEARCH_PATHS = {
    OS_WIN32: "${user.home}\\AppData\\Roaming\\GNU MCU Eclipse\\Build Tools\\*\\bin;"
    "C:\\Program Files\\GNU MCU Eclipse\\Build Tools\\*\\bin",
}

_DIGITS = re.compile(r"(\d+)")


class DiscoveryProbe(Protocol):
    def discover_build_tools_path(self) -> str: ...

    def discover_toolchain_path(self, name: str, search_path: str) -> str: ...


class NullDiscovery:
    """Probe that never finds anything."""

    def discover_build_tools_path(self) -> str:
        return ""

    def discover_toolchain_path(self, name: str, search_path: str) -> str:
        return ""


def _version_key(path: str) -> list:
    return [int(p) if p.isdigit() else p for p in _DIGITS.split(path)]


class FilesystemDiscovery:
    """Scan search paths on disk for executables.

    A search path is a list of folders separated by ``;`` on Windows and
    ``:`` elsewhere.  Each folder may use ``${user.home}``, ``~``,
    environment variables and glob patterns.  When a pattern matches
    several folders the highest version wins.
    """

    def __init__(
        self,
        *,
        registry: ToolchainRegistry | None = None,
        os_name: str | None = None,
        home: Path | None = None,
        build_tools_search_path: str | None = None,
    ) -> None:
        self.registry = registry if registry is not None else builtin_registry()
        self.os_name = os_name or current_os()
        self.home = Path(home) if home is not None else Path.home()
        if build_tools_search_path is None:
            build_tools_search_path = _BUILD_TOOLS_SEARCH_PATHS.get(self.os_name, "")
        self.build_tools_search_path = build_tools_search_path

    @property
    def separator(self) -> str:
        return ";" if self.os_name == OS_WIN32 else ":"

    def expand(self, entry: str) -> str:
        entry = entry.strip().replace("${user.home}", str(self.home))
        if entry.startswith("~"):
            entry = str(self.home) + entry[1:]
        return os.path.expandvars(entry)

    def candidates(self, search_path: str) -> list[Path]:
        out: list[Path] = []
        for raw in search_path.split(self.separator):
            if not raw.strip():
                continue
            pattern = self.expand(raw)
            matches = sorted(glob.glob(pattern), key=_version_key, reverse=True)
            out.extend(Path(m) for m in matches)
        return out

    def find_executable(self, search_path: str, executable: str) -> str:
        """Return the first folder in *search_path* holding *executable*."""
        try:
            for folder in self.candidates(search_path):
                if (folder / executable).is_file():
                    return str(folder)
        except OSError as exc:
            logger.warning("Search for %s in %r failed: %s", executable, search_path, exc)
        return ""

    def discover_build_tools_path(self) -> str:
        if not self.build_tools_search_path:
            return ""
        exe = "make.exe" if self.os_name == OS_WIN32 else "make"
        path = self.find_executable(self.build_tools_search_path, exe)
        logger.debug("Build tools discovery: %r", path)
        return path

    def discover_toolchain_path(self, name: str, search_path: str) -> str:
        try:
            executable = self.registry.get(name).gcc_executable(self.os_name)
        except UnknownToolchainError:
            executable = self.registry.default.gcc_executable(self.os_name)
        path = self.find_executable(search_path, executable)
        logger.debug("Toolchain discovery for %s in %r: %r", name, search_path, path)
        return path
