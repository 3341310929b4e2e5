from __future__ import annotations

import sys

# Namespace ids as used by the Eclipse plug-ins whose preferences are managed.
COMMON_NAMESPACE = "ilg.gnumcueclipse.managedbuild.cross"
PLUGIN_NAMESPACE = "ilg.gnumcueclipse.managedbuild.cross.arm"
DEPRECATED_NAMESPACE = "ilg.gnuarmeclipse.managedbuild.cross"

OS_WIN32 = "win32"
OS_LINUX = "linux"
OS_MACOSX = "macosx"


def current_os(platform: str | None = None) -> str:
    """Return the Eclipse style identifier of the running OS."""
    plat = sys.platform if platform is None else platform
    if plat.startswith("win") or plat == "cygwin":
        return OS_WIN32
    if plat == "darwin":
        return OS_MACOSX
    if plat.startswith("linux"):
        return OS_LINUX
    return plat
