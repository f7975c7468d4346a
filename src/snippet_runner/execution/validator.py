from __future__ import annotations

import logging

from .errors import ExecutionError
from .languages import LanguageTable
from .process import ProcessRunner
from .scratch import ScratchFileManager
from .types import ValidationResult

logger = logging.getLogger(__name__)


class Validator:
    """Syntax-check source with the interpreter's compile-only mode.

    The program is never run, so only syntax errors are reported; a reference to
    an undefined name passes.

    Example:
        ```python
        validator = Validator(ProcessRunner(), ScratchFileManager("/tmp/code-execution"), LanguageTable.default())
        verdict = await validator.validate("if True:", "python")
        ```
    """

    def __init__(
        self,
        runner: ProcessRunner,
        scratch: ScratchFileManager,
        languages: LanguageTable,
        *,
        timeout_ms: int = 30000,
    ) -> None:
        """Wire the validator to its collaborators.

        Example:
            ```python
            validator = Validator(runner, scratch, table, timeout_ms=5000)
            ```
        """
        self._runner = runner
        self._scratch = scratch
        self._languages = languages
        self._timeout_ms = timeout_ms

    async def validate(self, code: str, language: str) -> ValidationResult:
        """Return whether `code` parses, with the checker's messages as errors.

        Unknown languages are recorded as a finding instead of raising.

        Example:
            ```python
            verdict = await validator.validate("console.log(", "js")
            assert not verdict.is_valid
            ```
        """
        errors: list[str] = []
        spec = self._languages.lookup(language)
        if spec is None:
            errors.append(f"Validation not implemented for language: {language}")
            return ValidationResult.from_errors(errors)

        try:
            with self._scratch.scratch_file(code, spec) as scratch:
                out = await self._runner.run(spec.command, spec.check_argv(scratch.path), self._timeout_ms)
            if out.stderr:
                errors.append(out.stderr)
        except ExecutionError as exc:
            errors.append(str(exc))

        logger.debug("Validated %s source: %d error(s)", spec.language.value, len(errors))
        return ValidationResult.from_errors(errors)
