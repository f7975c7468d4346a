from pathlib import Path

import pytest

from snippet_runner import ServiceConfig
from snippet_runner.execution import Language, LanguageTable, UnsupportedLanguageError
from snippet_runner.execution.languages import normalize_language


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("python", Language.PYTHON),
        ("Python", Language.PYTHON),
        ("py", Language.PYTHON),
        ("javascript", Language.JAVASCRIPT),
        ("JS", Language.JAVASCRIPT),
        (" node ", Language.JAVASCRIPT),
        ("ruby", None),
        ("", None),
    ],
)
def test_normalize_language(name: str, expected: Language | None) -> None:
    assert normalize_language(name) is expected


def test_resolve_rejects_unknown_language() -> None:
    with pytest.raises(UnsupportedLanguageError, match="Language cobol is not supported"):
        LanguageTable.default().resolve("cobol")


def test_python_entry_runs_file_directly() -> None:
    spec = LanguageTable.default().resolve("python")
    path = Path("/tmp/code-execution/abc.py")

    assert spec.command == "python3"
    assert spec.extension == "py"
    assert spec.run_argv(path) == [str(path)]
    check = spec.check_argv(path)
    assert check[0] == "-c"
    assert "compile(" in check[1]
    assert check[-1] == str(path)


def test_javascript_entry_uses_node_check_mode() -> None:
    spec = LanguageTable.default().resolve("node")
    path = Path("/tmp/code-execution/abc.js")

    assert spec.command == "node"
    assert spec.run_argv(path) == [str(path)]
    assert spec.check_argv(path) == ["--check", str(path)]


def test_from_config_uses_configured_commands(tmp_path: Path) -> None:
    config = ServiceConfig(scratch_dir=str(tmp_path), python_command="/opt/py/bin/python", node_command="nodejs")
    table = LanguageTable.from_config(config)

    assert table.resolve("python").command == "/opt/py/bin/python"
    assert table.resolve("js").command == "nodejs"


def test_for_extension_and_aliases() -> None:
    table = LanguageTable.default()

    assert table.for_extension(".PY").language is Language.PYTHON  # type: ignore[union-attr]
    assert table.for_extension("js").language is Language.JAVASCRIPT  # type: ignore[union-attr]
    assert table.for_extension(".rb") is None
    assert set(table.aliases_for(Language.JAVASCRIPT)) == {"javascript", "js", "node"}
