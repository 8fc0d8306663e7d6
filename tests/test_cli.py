"""CLI integration tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from treefilter.cli import main


def _make_tree(root: Path) -> None:
    """Create a minimal project tree with filter config files."""
    (root / "_filter.json").write_text('{"exclude": ["**/*.tmp"]}')
    docs = root / "docs"
    docs.mkdir()
    (docs / "_filter.json").write_text("true")
    drafts = docs / "drafts"
    drafts.mkdir()
    (drafts / "_filter.json").write_text("false")


@pytest.fixture
def tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _lines(out: str) -> list[str]:
    return [line for line in out.split("\n") if line]


def test_filter_paths_from_args(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(
        ["--config-glob", "**/_filter.json", "readme.md", "docs/a.md", "docs/drafts/b.md"]
    )
    assert code == 0
    assert _lines(capsys.readouterr().out) == ["docs/a.md"]


def test_include_by_default(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["-g", "**/_filter.json", "--include-by-default", "readme.md", "x.tmp"])
    assert code == 0
    assert _lines(capsys.readouterr().out) == ["readme.md"]


def test_paths_from_stdin(
    tree: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("docs/a.md\n\nnotes.tmp\ndocs/b.tmp\n"))
    assert main(["--config-glob", "**/_filter.json"]) == 0
    assert _lines(capsys.readouterr().out) == ["docs/a.md", "docs/b.tmp"]


def test_stdin_flag_adds_to_args(
    tree: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("docs/b.md\n"))
    assert main(["--config-glob", "**/_filter.json", "--stdin", "docs/a.md"]) == 0
    assert _lines(capsys.readouterr().out) == ["docs/a.md", "docs/b.md"]


def test_explain(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(
        ["--config-glob", "**/_filter.json", "--explain", "readme.md", "x.tmp", "docs/a.md"]
    )
    assert code == 0
    assert _lines(capsys.readouterr().out) == [
        "readme.md\texcluded\tdefault",
        "x.tmp\texcluded\t.",
        "docs/a.md\tincluded\tdocs",
    ]


def test_explain_absolute_paths(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    doc = str(tree / "docs" / "a.md")
    draft = str(tree / "docs" / "drafts" / "b.md")
    assert main(["-g", "**/_filter.json", "--explain", doc, draft]) == 0
    assert _lines(capsys.readouterr().out) == [
        f"{doc}\tincluded\tdocs",
        f"{draft}\texcluded\tdocs/drafts",
    ]


def test_missing_config_glob(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["readme.md"]) == 1
    assert "No config glob specified" in capsys.readouterr().err


def test_config_glob_from_settings_file(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tree / "treefilter.toml").write_text(
        'config-glob = "**/_filter.json"\ninclude-by-default = true\n'
    )
    assert main(["readme.md", "docs/drafts/b.md"]) == 0
    assert _lines(capsys.readouterr().out) == ["readme.md"]


def test_cli_flag_overrides_settings_file(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tree / ".treefilter.toml").write_text('config-glob = "nothing/*.json"\n')
    assert main(["--config-glob", "**/_filter.json", "docs/a.md"]) == 0
    assert _lines(capsys.readouterr().out) == ["docs/a.md"]


def test_invalid_settings_value(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tree / "treefilter.toml").write_text('config-glob = "**/_filter.json"\ndebug = "yes"\n')
    assert main(["readme.md"]) == 1
    assert "'debug' option must be true or false" in capsys.readouterr().err


def test_invalid_filter_config(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tree / "docs" / "_filter.json").write_text('"everything"')
    assert main(["--config-glob", "**/_filter.json", "docs/a.md"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: Could not parse the config in docs")


def test_debug_logs_to_stderr(tree: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config-glob", "**/_filter.json", "--debug", "docs/a.md"]) == 0
    captured = capsys.readouterr()
    assert _lines(captured.out) == ["docs/a.md"]
    assert "Processing ./docs/a.md" in captured.err
    assert "Included by ./docs" in captured.err


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("v") or out.startswith("unknown")
