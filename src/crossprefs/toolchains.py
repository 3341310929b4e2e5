"""Known cross toolchains.

A :class:`ToolchainRegistry` is an immutable, ordered table of
:class:`ToolchainDefinition` objects with one designated default entry.  The
registry shipped with the package is returned by :func:`builtin_registry`;
additional tables can be read from INI files with :func:`load_registry`.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .errors import RegistryError, UnknownToolchainError
from .io_config import IniIOError, read_sections

DEFAULT_TOOLCHAIN_NAME = "GNU MCU Eclipse ARM Embedded GCC"

SECTION_PREFIX = "toolchain:"


@dataclass(frozen=True)
class ToolchainDefinition:
    name: str
    prefix: str = "arm-none-eabi-"
    suffix: str = ""
    family: str = "arm"
    make_command: str = "make"
    remove_command: str = "rm"
    default_search_path_by_os: Mapping[str, str] = field(
        default_factory=dict, hash=False
    )

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise RegistryError("toolchain name must not be empty")
        object.__setattr__(
            self,
            "default_search_path_by_os",
            MappingProxyType(dict(self.default_search_path_by_os)),
        )

    def default_search_path_for_os(self, os_name: str) -> str:
        return self.default_search_path_by_os.get(os_name, "")

    def gcc_executable(self, os_name: str = "") -> str:
        exe = f"{self.prefix}gcc{self.suffix}"
        return exe + ".exe" if os_name == "win32" else exe


class ToolchainRegistry:
    """Ordered, read-only collection of toolchain definitions."""

    def __init__(
        self,
        definitions: Iterable[ToolchainDefinition],
        *,
        default_name: str = DEFAULT_TOOLCHAIN_NAME,
    ) -> None:
        self._definitions: tuple[ToolchainDefinition, ...] = tuple(definitions)
        self._by_name: dict[str, ToolchainDefinition] = {}
        for tc in self._definitions:
            if tc.name in self._by_name:
                raise RegistryError(f"duplicate toolchain: {tc.name!r}")
            self._by_name[tc.name] = tc
        if default_name not in self._by_name:
            raise RegistryError(f"default toolchain {default_name!r} is not defined")
        self.default_name = default_name

    def __iter__(self) -> Iterator[ToolchainDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def list(self) -> tuple[ToolchainDefinition, ...]:
        return self._definitions

    def names(self) -> list[str]:
        return [tc.name for tc in self._definitions]

    def get(self, name: str) -> ToolchainDefinition:
        try:
            return self._by_name[name]
        except KeyError as exc:
            raise UnknownToolchainError(name) from exc

    @property
    def default(self) -> ToolchainDefinition:
        return self._by_name[self.default_name]

    def extended(self, definitions: Iterable[ToolchainDefinition]) -> ToolchainRegistry:
        """Return a new registry with *definitions* appended or replaced."""
        merged = dict(self._by_name)
        order = list(self._by_name)
        for tc in definitions:
            if tc.name not in merged:
                order.append(tc.name)
            merged[tc.name] = tc
        return ToolchainRegistry(
            (merged[n] for n in order), default_name=self.default_name
        )


_XPACK_SEARCH_PATHS = {
    "win32": "${user.home}\\AppData\\Roaming\\GNU MCU Eclipse\\ARM Embedded GCC\\*\\bin;"
    "C:\\Program Files\\GNU MCU Eclipse\\ARM Embedded GCC\\*\\bin",
    "linux": "${user.home}/opt/gnu-mcu-eclipse/arm-none-eabi-gcc/*/bin:"
    "/opt/gnu-mcu-eclipse/arm-none-eabi-gcc/*/bin",
    "macosx": "${user.home}/opt/gnu-mcu-eclipse/arm-none-eabi-gcc/*/bin:"
    "/opt/gnu-mcu-eclipse/arm-none-eabi-gcc/*/bin",
}

_ARM_EMBEDDED_SEARCH_PATHS = {
    "win32": "C:\\Program Files (x86)\\GNU Tools ARM Embedded\\*\\bin",
    "linux": "/usr/local/gcc-arm-none-eabi-*/bin:${user.home}/opt/gcc-arm-none-eabi-*/bin",
    "macosx": "/usr/local/gcc-arm-none-eabi-*/bin:${user.home}/opt/gcc-arm-none-eabi-*/bin",
}


def builtin_registry() -> ToolchainRegistry:
    """Return the toolchain table shipped with the package."""
    return ToolchainRegistry(
        [
            ToolchainDefinition(
                DEFAULT_TOOLCHAIN_NAME,
                default_search_path_by_os=_XPACK_SEARCH_PATHS,
            ),
            ToolchainDefinition(
                "GNU Tools for ARM Embedded Processors",
                default_search_path_by_os=_ARM_EMBEDDED_SEARCH_PATHS,
            ),
            ToolchainDefinition("Linaro ARMv7 bare-metal EABI", prefix="arm-eabi-"),
            ToolchainDefinition(
                "Linaro ARMv7 big-endian bare-metal EABI", prefix="armeb-eabi-"
            ),
            ToolchainDefinition(
                "Linaro ARMv7 Linux GNU EABI HF", prefix="arm-linux-gnueabihf-"
            ),
            ToolchainDefinition(
                "Linaro AArch64 bare-metal ELF", prefix="aarch64-elf-", family="aarch64"
            ),
            ToolchainDefinition(
                "Linaro AArch64 big-endian bare-metal ELF",
                prefix="aarch64_be-elf-",
                family="aarch64",
            ),
            ToolchainDefinition(
                "Linaro AArch64 Linux GNU", prefix="aarch64-linux-gnu-", family="aarch64"
            ),
            ToolchainDefinition("Sourcery CodeBench Lite for ARM EABI"),
            ToolchainDefinition(
                "Sourcery CodeBench Lite for ARM GNU/Linux",
                prefix="arm-none-linux-gnueabi-",
            ),
            ToolchainDefinition("devkitPro ARM EABI", prefix="arm-eabi-"),
            ToolchainDefinition("Yagarto, Summon, etc. ARM EABI"),
            ToolchainDefinition("Custom"),
        ]
    )


def _definition_from_section(name: str, values: Mapping[str, str]) -> ToolchainDefinition:
    search = {
        key[len("search_path."):]: value
        for key, value in values.items()
        if key.startswith("search_path.")
    }
    return ToolchainDefinition(
        name,
        prefix=values.get("prefix", "arm-none-eabi-"),
        suffix=values.get("suffix", ""),
        family=values.get("family", "arm"),
        make_command=values.get("make", "make"),
        remove_command=values.get("rm", "rm"),
        default_search_path_by_os=search,
    )


def load_registry(
    path: Path, *, base: ToolchainRegistry | None = None
) -> ToolchainRegistry:
    """Read ``[toolchain:<name>]`` sections from *path*.

    Definitions are layered over *base* (the built-in table when omitted);
    a section whose name matches an existing toolchain replaces it.  An
    optional ``[registry]`` section may name the ``default`` toolchain.
    """

    try:
        data = read_sections(Path(path))
    except IniIOError as exc:
        raise RegistryError(str(exc)) from exc
    base = base if base is not None else builtin_registry()
    definitions = [
        _definition_from_section(section[len(SECTION_PREFIX):].strip(), values)
        for section, values in data.items()
        if section.startswith(SECTION_PREFIX)
    ]
    registry = base.extended(definitions)
    default_name = data.get("registry", {}).get("default")
    if default_name:
        registry = ToolchainRegistry(registry, default_name=default_name)
    return registry
