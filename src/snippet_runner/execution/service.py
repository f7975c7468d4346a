from __future__ import annotations

import logging
import time
from typing import Any

from ..config import ServiceConfig
from .errors import ExecutionError
from .languages import LanguageTable
from .process import ProcessRunner
from .scratch import ScratchFileManager
from .types import ExecutionRequest, ExecutionResult, FailureKind, ValidationResult, require_code_and_language
from .validator import Validator

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    """Return whole milliseconds elapsed since a `time.monotonic()` reading.

    Example:
        ```python
        ms = _elapsed_ms(time.monotonic())
        ```
    """
    return int((time.monotonic() - started) * 1000)


class CodeExecutionService:
    """Run and syntax-check user code, one scratch file and one child process per call.

    `execute` never raises for a failed run; every failure comes back as an
    `ExecutionResult` with `error` and `error_kind` set.

    Example:
        ```python
        service = CodeExecutionService(ServiceConfig(scratch_dir="/tmp/runs"))
        result = await service.execute(ExecutionRequest(code="print('hi')", language="python"))
        ```
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        *,
        runner: ProcessRunner | None = None,
        scratch: ScratchFileManager | None = None,
        languages: LanguageTable | None = None,
    ) -> None:
        """Build the service from injected config and optional collaborators.

        The scratch directory is created here, once.

        Example:
            ```python
            service = CodeExecutionService(ServiceConfig(timeout_ms=5000), languages=LanguageTable.default())
            ```
        """
        self._config = config or ServiceConfig()
        self._runner = runner or ProcessRunner()
        self._scratch = scratch or ScratchFileManager(self._config.scratch_dir)
        self._languages = languages or LanguageTable.from_config(self._config)
        self._validator = Validator(
            self._runner,
            self._scratch,
            self._languages,
            timeout_ms=self._config.timeout_ms,
        )
        self._scratch.ensure_directory()

    @property
    def config(self) -> ServiceConfig:
        """Return the config this service was built with.

        Example:
            ```python
            print(service.config.timeout_ms)
            ```
        """
        return self._config

    @property
    def languages(self) -> LanguageTable:
        """Return the language dispatch table in use.

        Example:
            ```python
            spec = service.languages.resolve("python")
            ```
        """
        return self._languages

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        """Run the request's code and return its output or a structured failure.

        Example:
            ```python
            result = await service.execute(ExecutionRequest(code="while True: pass", language="python"))
            assert result.timed_out
            ```
        """
        started = time.monotonic()
        try:
            spec = self._languages.resolve(request.language)
            with self._scratch.scratch_file(request.code, spec) as scratch:
                out = await self._runner.run(spec.command, spec.run_argv(scratch.path), self._config.timeout_ms)
        except ExecutionError as exc:
            result = ExecutionResult(
                execution_time_ms=_elapsed_ms(started),
                error=str(exc),
                error_kind=exc.kind,
                timed_out=exc.kind is FailureKind.TIMEOUT,
            )
        except Exception as exc:
            logger.exception("Unexpected failure executing %s code", request.language)
            result = ExecutionResult(
                execution_time_ms=_elapsed_ms(started),
                error=str(exc) or type(exc).__name__,
                error_kind=FailureKind.INTERNAL,
            )
        else:
            result = ExecutionResult(
                execution_time_ms=_elapsed_ms(started),
                output=out.stdout,
                error=out.stderr or None,
            )

        logger.info(
            "Executed %s code (project=%s) in %dms: %s",
            request.language,
            request.project_id,
            result.execution_time_ms,
            result.error_kind.value if result.error_kind else "ok",
        )
        return result

    async def validate(self, code: str, language: str) -> ValidationResult:
        """Syntax-check code without running it.

        Example:
            ```python
            verdict = await service.validate("def f(:", "python")
            ```
        """
        return await self._validator.validate(code, language)

    async def execute_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Execute a JSON-shaped request and return the JSON-shaped result.

        Example:
            ```python
            body = await service.execute_payload({"code": "print(1)", "language": "python", "projectId": 3})
            ```
        """
        result = await self.execute(ExecutionRequest.from_dict(payload))
        return result.to_dict()

    async def validate_payload(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Validate a JSON-shaped `{code, language}` request.

        Example:
            ```python
            body = await service.validate_payload({"code": "x = (", "language": "python"})
            ```
        """
        code, language = require_code_and_language(payload)
        verdict = await self.validate(code, language)
        return verdict.to_dict()
