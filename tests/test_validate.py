import asyncio
import shutil
import sys
from pathlib import Path

import pytest

from snippet_runner import CodeExecutionService, ServiceConfig

requires_node = pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")


def _service(tmp_path: Path, **overrides) -> CodeExecutionService:
    overrides.setdefault("python_command", sys.executable)
    return CodeExecutionService(ServiceConfig(scratch_dir=str(tmp_path), **overrides))


def validate(service: CodeExecutionService, code: str, language: str):
    return asyncio.run(service.validate(code, language))


def test_valid_python_passes(tmp_path: Path) -> None:
    verdict = validate(_service(tmp_path), "x = 1\nprint(x)\n", "python")

    assert verdict.is_valid is True
    assert verdict.errors == ()


def test_dangling_colon_is_a_syntax_error(tmp_path: Path) -> None:
    verdict = validate(_service(tmp_path), "if True:\n", "python")

    assert verdict.is_valid is False
    assert len(verdict.errors) == 1
    assert "Error" in verdict.errors[0]


def test_undefined_name_is_not_a_syntax_error(tmp_path: Path) -> None:
    verdict = validate(_service(tmp_path), "print(undefined_name)\n", "python")

    assert verdict.is_valid is True


def test_validation_never_runs_top_level_code(tmp_path: Path) -> None:
    marker = tmp_path / "ran"
    code = f"import pathlib\npathlib.Path({str(marker)!r}).write_text('yes')\n"

    verdict = validate(_service(tmp_path / "scratch"), code, "python")

    assert verdict.is_valid is True
    assert not marker.exists()


def test_unknown_language_is_recorded_not_raised(tmp_path: Path) -> None:
    verdict = validate(_service(tmp_path), "puts 1", "ruby")

    assert verdict.is_valid is False
    assert verdict.errors == ("Validation not implemented for language: ruby",)


def test_missing_interpreter_is_reported_as_error(tmp_path: Path) -> None:
    service = _service(tmp_path, python_command="no-such-python-xyz")

    verdict = validate(service, "x = 1", "python")

    assert verdict.is_valid is False
    assert "no-such-python-xyz" in verdict.errors[0]


def test_validation_leaves_no_files_behind(tmp_path: Path) -> None:
    service = _service(tmp_path)

    validate(service, "x = 1", "python")
    validate(service, "def f(:", "python")

    assert list(tmp_path.iterdir()) == []


@requires_node
def test_javascript_syntax_check(tmp_path: Path) -> None:
    service = _service(tmp_path)

    assert validate(service, "const x = 1;\nconsole.log(x);\n", "javascript").is_valid
    broken = validate(service, "function (\n", "js")
    assert broken.is_valid is False
    assert "SyntaxError" in broken.errors[0]
    assert validate(service, "console.log(notDefinedAnywhere);\n", "node").is_valid
    assert list(tmp_path.iterdir()) == []
