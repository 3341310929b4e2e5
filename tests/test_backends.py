from __future__ import annotations

from pathlib import Path

import pytest

from crossprefs.backends import get_backend_for_path, supported_suffixes
from crossprefs.backends.ini_backend import IniBackend
from crossprefs.backends.toml_backend import TomlBackend
from crossprefs.backends.yaml_backend import YamlBackend
from crossprefs.errors import PrefsLoadError


def test_registry_by_suffix() -> None:
    assert isinstance(get_backend_for_path(Path("a.INI")), IniBackend)
    assert isinstance(get_backend_for_path(Path("a.yml")), YamlBackend)
    assert isinstance(get_backend_for_path(Path("a.toml")), TomlBackend)
    assert supported_suffixes() == [".ini", ".toml", ".yaml", ".yml"]


def test_ini_keeps_key_case_and_percent(tmp_path: Path) -> None:
    path = tmp_path / "prefs.ini"
    data = {"ns": {"toolchain.GNU Tools.path": "C:\\Program Files\\%VER%"}}
    IniBackend().save(path, data)
    assert "toolchain.GNU Tools.path = C:\\Program Files\\%VER%" in path.read_text()
    assert IniBackend().load(path) == data


def test_ini_missing_file(tmp_path: Path) -> None:
    assert IniBackend().load(tmp_path / "none.ini") == {}


def test_yaml_reads_hand_written_file(tmp_path: Path) -> None:
    path = tmp_path / "prefs.yaml"
    path.write_text("common:\n  buildToolsPath: /bt\n  count: 3\n")
    assert YamlBackend().load(path) == {"common": {"buildToolsPath": "/bt", "count": "3"}}


def test_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "prefs.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(PrefsLoadError):
        YamlBackend().load(path)
    path.write_text("common: 3\n")
    with pytest.raises(PrefsLoadError):
        YamlBackend().load(path)


def test_yaml_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "prefs.yaml"
    path.write_text("\n")
    assert YamlBackend().load(path) == {}


def test_toml_quotes_dotted_keys(tmp_path: Path) -> None:
    path = tmp_path / "prefs.toml"
    TomlBackend().save(path, {"plugin": {"toolchain.foo.path": "/opt/foo"}})
    text = path.read_text()
    assert "[plugin]" in text
    assert '"toolchain.foo.path" = "/opt/foo"' in text
    assert TomlBackend().load(path) == {"plugin": {"toolchain.foo.path": "/opt/foo"}}


def test_toml_broken_file(tmp_path: Path) -> None:
    path = tmp_path / "prefs.toml"
    path.write_text("[plugin\n")
    with pytest.raises(PrefsLoadError):
        TomlBackend().load(path)


def test_atomic_write_leaves_no_temp(tmp_path: Path) -> None:
    path = tmp_path / "sub" / "prefs.ini"
    IniBackend().save(path, {"ns": {"k": "v"}})
    assert sorted(p.name for p in path.parent.iterdir()) == ["prefs.ini"]


def test_yaml_null_value_loads_as_unset(tmp_path: Path) -> None:
    path = tmp_path / "prefs.yaml"
    path.write_text("common:\n  buildToolsPath:\n  other: ~\n  keep: /bt\n")
    assert YamlBackend().load(path) == {
        "common": {"buildToolsPath": "", "other": "", "keep": "/bt"}
    }


def test_yaml_rejects_nested_values(tmp_path: Path) -> None:
    path = tmp_path / "prefs.yaml"
    path.write_text("common:\n  buildToolsPath:\n    - /a\n    - /b\n")
    with pytest.raises(PrefsLoadError):
        YamlBackend().load(path)
    path.write_text("common:\n  buildToolsPath:\n    win32: C:\\bt\n")
    with pytest.raises(PrefsLoadError):
        YamlBackend().load(path)


def test_toml_rejects_nested_values(tmp_path: Path) -> None:
    path = tmp_path / "prefs.toml"
    path.write_text('[plugin]\n"toolchain.foo.searchPath" = ["/a", "/b"]\n')
    with pytest.raises(PrefsLoadError):
        TomlBackend().load(path)
    path.write_text("[plugin.toolchain]\nfoo = \"/opt/foo\"\n")
    with pytest.raises(PrefsLoadError):
        TomlBackend().load(path)


@pytest.mark.parametrize("backend", [IniBackend(), YamlBackend(), TomlBackend()])
def test_undecodable_file_raises_load_error(tmp_path: Path, backend) -> None:
    path = tmp_path / f"prefs{backend.suffixes[0]}"
    path.write_bytes(b"\xff\xfe[x]\n")
    with pytest.raises(PrefsLoadError):
        backend.load(path)
