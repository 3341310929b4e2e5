from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc

DEFAULT_FILENAME = "defaults.ini"


def _app_name(default: str) -> str:
    return os.getenv("CROSSPREFS_APP_NAME", default)


def user_config_dir(app_name: str = "crossprefs") -> Path:
    app = _app_name(app_name)
    return Path(_uc(appname=app)).resolve()


def tree_file(filename: str = DEFAULT_FILENAME) -> Path:
    """Return the file backing the default preference tree.

    ``CROSSPREFS_HOME`` replaces the per-user configuration directory when
    set.
    """

    env = os.getenv("CROSSPREFS_HOME")
    base = Path(env).expanduser().resolve() if env else user_config_dir()
    return base / filename


def registry_file() -> Path | None:
    """Return the user's extra toolchain table, if one exists."""
    env = os.getenv("CROSSPREFS_HOME")
    base = Path(env).expanduser().resolve() if env else user_config_dir()
    path = base / "toolchains.ini"
    return path if path.is_file() else None
