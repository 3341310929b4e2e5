class CrossPrefsError(Exception):
    """Base class for crossprefs errors."""


class UnknownNamespaceError(CrossPrefsError):
    pass


class PrefsLoadError(CrossPrefsError):
    """Raised when a backend fails to parse its file."""


class PrefsWriteError(CrossPrefsError):
    """Raised when the preference tree cannot be written."""


class RegistryError(CrossPrefsError):
    """Raised when a toolchain table is malformed."""


class UnknownToolchainError(CrossPrefsError):
    """Raised when a toolchain is not part of the registry."""
