from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class FailureKind(str, Enum):
    """Structured failure category attached to a failed execution.

    Example:
        ```python
        kind = FailureKind("timeout")
        ```
    """

    UNSUPPORTED_LANGUAGE = "unsupported_language"
    SPAWN_FAILURE = "spawn_failure"
    NON_ZERO_EXIT = "non_zero_exit"
    TIMEOUT = "timeout"
    SCRATCH_WRITE = "scratch_write"
    INTERNAL = "internal"


def require_code_and_language(payload: dict[str, Any]) -> tuple[str, str]:
    """Return the non-empty `code` and `language` strings of a JSON payload.

    Raises `ValueError` when either is missing, empty, or not a string.

    Example:
        ```python
        code, language = require_code_and_language({"code": "print(1)", "language": "py"})
        ```
    """
    code = payload.get("code")
    language = payload.get("language")
    if not isinstance(code, str) or not code or not isinstance(language, str) or not language:
        raise ValueError("Code and language are required")
    return code, language


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """One request to run user code in a given language.

    Example:
        ```python
        req = ExecutionRequest(code="print('hi')", language="python", project_id=7)
        ```
    """

    code: str
    language: str
    project_id: int | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ExecutionRequest":
        """Build a request from its JSON shape `{code, language, projectId?}`.

        Example:
            ```python
            req = ExecutionRequest.from_dict({"code": "print(1)", "language": "python"})
            ```
        """
        code, language = require_code_and_language(payload)
        project_id = payload.get("projectId")
        if project_id is not None and (isinstance(project_id, bool) or not isinstance(project_id, int)):
            raise ValueError("'projectId' must be an integer")
        return cls(code=code, language=language, project_id=project_id)


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Normalized outcome of one execution, success or failure.

    Example:
        ```python
        result = ExecutionResult(output="hi\\n", execution_time_ms=41)
        ```
    """

    execution_time_ms: int
    output: str | None = None
    error: str | None = None
    error_kind: FailureKind | None = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        """Return True when the program exited with status zero.

        Example:
            ```python
            if result.ok:
                print(result.output)
            ```
        """
        return self.error_kind is None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape `{output?, error?, executionTime, timedOut, errorKind?}`.

        Example:
            ```python
            payload = result.to_dict()
            ```
        """
        payload: dict[str, Any] = {}
        if self.output is not None:
            payload["output"] = self.output
        if self.error is not None:
            payload["error"] = self.error
        payload["executionTime"] = self.execution_time_ms
        payload["timedOut"] = self.timed_out
        if self.error_kind is not None:
            payload["errorKind"] = self.error_kind.value
        return payload


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a syntax-only check.

    Example:
        ```python
        verdict = ValidationResult(is_valid=False, errors=("SyntaxError: ...",))
        ```
    """

    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        """Build a result that is valid exactly when no errors were recorded.

        Example:
            ```python
            verdict = ValidationResult.from_errors([])
            ```
        """
        return cls(is_valid=not errors, errors=tuple(errors))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape `{isValid, errors}`.

        Example:
            ```python
            payload = verdict.to_dict()
            ```
        """
        return {"isValid": self.is_valid, "errors": list(self.errors)}


@dataclass(frozen=True, slots=True)
class ScratchFile:
    """Short-lived file holding the source for exactly one call.

    Example:
        ```python
        scratch = ScratchFile(path=Path("/tmp/code-execution/1f2e.py"), extension="py")
        ```
    """

    path: Path
    extension: str


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    """Captured streams of a child process that exited with status zero.

    Example:
        ```python
        out = ProcessOutput(stdout="hi\\n", stderr="", returncode=0)
        ```
    """

    stdout: str
    stderr: str
    returncode: int = 0
