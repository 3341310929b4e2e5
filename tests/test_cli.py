from __future__ import annotations

import json
from pathlib import Path

import pytest

from crossprefs import cli
from crossprefs.core import PreferenceTree
from crossprefs.toolchains import DEFAULT_TOOLCHAIN_NAME

PLUGIN = "ilg.gnumcueclipse.managedbuild.cross.arm"


@pytest.fixture(autouse=True)
def _home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CROSSPREFS_HOME", str(tmp_path))


def test_set_and_get(tmp_path: Path, capsys) -> None:
    assert cli.main(["set", "toolchain.name", "Custom"]) == 0
    assert (tmp_path / "defaults.ini").is_file()
    capsys.readouterr()
    assert cli.main(["get", "toolchain.name"]) == 0
    assert capsys.readouterr().out.strip() == "Custom"


def test_get_missing_returns_one() -> None:
    assert cli.main(["get", "missing", "--namespace", "other"]) == 1


def test_show_json_filters_namespace(tmp_path: Path, capsys) -> None:
    tree = PreferenceTree(tmp_path / "defaults.ini")
    tree.put("a.b", "k", "1")
    tree.put("c", "k", "2")
    tree.flush()

    assert cli.main(["show", "--namespace", "a.b", "--as", "json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"a-b": {"k": "1"}}


def test_show_ini(tmp_path: Path, capsys) -> None:
    tree = PreferenceTree(tmp_path / "defaults.ini")
    tree.put("c", "toolchain.Foo.path", "/foo")
    tree.flush()

    assert cli.main(["show"]) == 0
    out = capsys.readouterr().out
    assert "[c]" in out
    assert "toolchain.Foo.path = /foo" in out


def test_toolchains_json(capsys) -> None:
    assert cli.main(["toolchains", "--os", "linux", "--json"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert rows[0]["name"] == DEFAULT_TOOLCHAIN_NAME
    assert rows[0]["default"] is True
    assert sum(r["default"] for r in rows) == 1
    assert rows[0]["family"] == "arm"
    assert (rows[0]["make"], rows[0]["remove"]) == ("make", "rm")
    by_name = {r["name"]: r for r in rows}
    assert by_name["Linaro AArch64 Linux GNU"]["family"] == "aarch64"


def test_paths(tmp_path: Path, capsys) -> None:
    assert cli.main(["paths", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["tree_file"] == str(tmp_path.resolve() / "defaults.ini")


def test_resolve_migrates_and_persists(tmp_path: Path, capsys) -> None:
    path = tmp_path / "prefs.yaml"
    tree = PreferenceTree(path)
    tree.put("ilg.gnuarmeclipse.managedbuild.cross", "buildToolsPath", "/old/bt")
    tree.put("ilg.gnuarmeclipse.managedbuild.cross", "toolchain.Custom.path", "/old/custom")
    tree.flush()

    rc = cli.main(
        ["--file", str(path), "resolve", "--os", "linux", "--no-discovery", "--json"]
    )

    assert rc == 0
    report = json.loads(capsys.readouterr().out)
    assert report["buildToolsPath"] == {"value": "/old/bt", "source": "deprecated"}
    assert report["toolchains"]["Custom"] == {"value": "/old/custom", "source": "deprecated"}
    stored = PreferenceTree(path)
    assert stored.get("ilg.gnumcueclipse.managedbuild.cross", "buildToolsPath") == "/old/bt"
    assert stored.get(PLUGIN, "toolchain.Custom.path") == "/old/custom"
    assert stored.get(PLUGIN, "toolchain.name") == DEFAULT_TOOLCHAIN_NAME


def test_resolve_with_define_and_discovery(tmp_path: Path, capsys) -> None:
    bin_dir = tmp_path / "arm" / "10.3" / "bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "arm-none-eabi-gcc").write_text("")

    rc = cli.main(
        [
            "resolve",
            "--os",
            "linux",
            "-D",
            f"toolchain.Custom.searchPath={tmp_path}/arm/*/bin",
        ]
    )

    assert rc == 0
    out = capsys.readouterr().out
    assert f"Custom: {bin_dir} [discovered]" in out
    stored = PreferenceTree(tmp_path / "defaults.ini")
    assert stored.get(PLUGIN, "toolchain.Custom.path") == str(bin_dir)


def test_resolve_twice_is_stable(tmp_path: Path, capsys) -> None:
    args = ["resolve", "--os", "linux", "--no-discovery", "-D", "buildToolsPath=/bt"]
    assert cli.main(args) == 0
    first = (tmp_path / "defaults.ini").read_text()
    assert cli.main(args) == 0
    assert (tmp_path / "defaults.ini").read_text() == first
    assert "buildToolsPath: /bt [common]" in capsys.readouterr().out


def test_bad_define_is_usage_error() -> None:
    with pytest.raises(SystemExit):
        cli.main(["resolve", "-D", "novalue"])


def test_bad_registry_file_reports_error(tmp_path: Path, capsys) -> None:
    path = tmp_path / "toolchains.ini"
    path.write_text("[registry]\ndefault = Missing\n")
    assert cli.main(["toolchains", "--registry", str(path)]) == 2
    assert "Missing" in capsys.readouterr().err


def test_toolchains_show_registry_commands(tmp_path: Path, capsys) -> None:
    path = tmp_path / "toolchains.ini"
    path.write_text(
        "[toolchain:Win GCC]\n"
        "prefix = arm-none-eabi-\n"
        "suffix = .exe\n"
        "make = mingw32-make\n"
        "rm = del\n"
    )
    assert cli.main(["toolchains", "--registry", str(path), "--json"]) == 0
    row = json.loads(capsys.readouterr().out)[-1]
    assert row["name"] == "Win GCC"
    assert (row["suffix"], row["make"], row["remove"]) == (".exe", "mingw32-make", "del")
