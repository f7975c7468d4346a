from __future__ import annotations

from typing import ClassVar

from .types import FailureKind


class ExecutionError(Exception):
    """Base class for failures the orchestrator maps into a result.

    Example:
        ```python
        try:
            await runner.run("python3", ["main.py"], 30000)
        except ExecutionError as exc:
            print(exc.kind, exc)
        ```
    """

    kind: ClassVar[FailureKind] = FailureKind.INTERNAL


class UnsupportedLanguageError(ExecutionError):
    """Raised when a language has no dispatch table entry.

    Example:
        ```python
        raise UnsupportedLanguageError("cobol")
        ```
    """

    kind = FailureKind.UNSUPPORTED_LANGUAGE

    def __init__(self, language: str) -> None:
        """Store the rejected language name.

        Example:
            ```python
            err = UnsupportedLanguageError("ruby")
            ```
        """
        super().__init__(f"Language {language} is not supported")
        self.language = language


class SpawnFailureError(ExecutionError):
    """Raised when the interpreter executable could not be started.

    Example:
        ```python
        raise SpawnFailureError("node", FileNotFoundError(2, "No such file or directory"))
        ```
    """

    kind = FailureKind.SPAWN_FAILURE

    def __init__(self, command: str, cause: OSError) -> None:
        """Carry the OS-level error text of the failed spawn.

        Example:
            ```python
            err = SpawnFailureError("python3", PermissionError(13, "Permission denied"))
            ```
        """
        detail = cause.strerror or str(cause)
        super().__init__(f"Failed to start '{command}': {detail}")
        self.command = command


class NonZeroExitError(ExecutionError):
    """Raised when the child process exits with a non-zero status.

    Example:
        ```python
        raise NonZeroExitError(1, "Traceback (most recent call last): ...")
        ```
    """

    kind = FailureKind.NON_ZERO_EXIT

    def __init__(self, exit_code: int, stderr: str) -> None:
        """Use stderr as the message, or a generic exit-code message when empty.

        Example:
            ```python
            err = NonZeroExitError(3, "")
            assert str(err) == "Process exited with code 3"
            ```
        """
        super().__init__(stderr or f"Process exited with code {exit_code}")
        self.exit_code = exit_code
        self.stderr = stderr


class ExecutionTimeoutError(ExecutionError):
    """Raised when the child exceeded its wall-clock budget and was terminated.

    Example:
        ```python
        raise ExecutionTimeoutError(30000)
        ```
    """

    kind = FailureKind.TIMEOUT

    def __init__(self, timeout_ms: int) -> None:
        """Record the budget that was exceeded.

        Example:
            ```python
            err = ExecutionTimeoutError(500)
            ```
        """
        super().__init__("Code execution timed out")
        self.timeout_ms = timeout_ms


class ScratchWriteError(ExecutionError):
    """Raised when the source could not be written to its scratch file.

    Example:
        ```python
        raise ScratchWriteError(Path("/tmp/code-execution/x.py"), OSError(28, "No space left on device"))
        ```
    """

    kind = FailureKind.SCRATCH_WRITE

    def __init__(self, path: object, cause: OSError) -> None:
        """Carry the path and OS error of the failed write.

        Example:
            ```python
            err = ScratchWriteError("/tmp/x.py", OSError(13, "Permission denied"))
            ```
        """
        detail = cause.strerror or str(cause)
        super().__init__(f"Failed to write scratch file {path}: {detail}")
        self.path = path
