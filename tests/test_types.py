import pytest

from snippet_runner.execution import (
    ExecutionRequest,
    ExecutionResult,
    FailureKind,
    NonZeroExitError,
    SpawnFailureError,
    ValidationResult,
    require_code_and_language,
)


def test_request_from_dict_reads_project_id() -> None:
    req = ExecutionRequest.from_dict({"code": "print(1)", "language": "python", "projectId": 4})

    assert req == ExecutionRequest(code="print(1)", language="python", project_id=4)


@pytest.mark.parametrize(
    "payload",
    [{}, {"code": "print(1)"}, {"language": "python"}, {"code": "", "language": "python"}, {"code": 1, "language": "py"}],
)
def test_request_from_dict_requires_code_and_language(payload: dict) -> None:
    with pytest.raises(ValueError, match="Code and language are required"):
        ExecutionRequest.from_dict(payload)


def test_code_and_language_check_is_shared_by_execute_and_validate_payloads() -> None:
    assert require_code_and_language({"code": "x = 1", "language": "py", "extra": True}) == ("x = 1", "py")
    with pytest.raises(ValueError, match="Code and language are required"):
        require_code_and_language({"code": "x = 1", "language": ""})


def test_request_from_dict_rejects_non_integer_project_id() -> None:
    with pytest.raises(ValueError, match="projectId"):
        ExecutionRequest.from_dict({"code": "x", "language": "python", "projectId": "7"})


def test_failed_result_dict_omits_output() -> None:
    result = ExecutionResult(
        execution_time_ms=30001,
        error="Code execution timed out",
        error_kind=FailureKind.TIMEOUT,
        timed_out=True,
    )

    assert result.ok is False
    assert result.to_dict() == {
        "error": "Code execution timed out",
        "executionTime": 30001,
        "timedOut": True,
        "errorKind": "timeout",
    }


def test_validation_result_from_errors() -> None:
    assert ValidationResult.from_errors([]).to_dict() == {"isValid": True, "errors": []}
    assert ValidationResult.from_errors(["bad"]).to_dict() == {"isValid": False, "errors": ["bad"]}


def test_error_kinds_and_messages() -> None:
    assert NonZeroExitError(1, "trace").kind is FailureKind.NON_ZERO_EXIT
    assert str(NonZeroExitError(7, "")) == "Process exited with code 7"
    spawn = SpawnFailureError("node", FileNotFoundError(2, "No such file or directory"))
    assert spawn.kind is FailureKind.SPAWN_FAILURE
    assert str(spawn) == "Failed to start 'node': No such file or directory"
