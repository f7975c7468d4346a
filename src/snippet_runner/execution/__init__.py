from .errors import (
    ExecutionError,
    ExecutionTimeoutError,
    NonZeroExitError,
    ScratchWriteError,
    SpawnFailureError,
    UnsupportedLanguageError,
)
from .languages import Language, LanguageSpec, LanguageTable
from .process import ProcessRunner
from .scratch import ScratchFileManager
from .service import CodeExecutionService
from .types import (
    ExecutionRequest,
    ExecutionResult,
    FailureKind,
    ProcessOutput,
    ScratchFile,
    ValidationResult,
    require_code_and_language,
)
from .validator import Validator

__all__ = [
    "CodeExecutionService",
    "ExecutionError",
    "ExecutionRequest",
    "ExecutionResult",
    "ExecutionTimeoutError",
    "FailureKind",
    "Language",
    "LanguageSpec",
    "LanguageTable",
    "NonZeroExitError",
    "ProcessOutput",
    "ProcessRunner",
    "ScratchFile",
    "ScratchFileManager",
    "ScratchWriteError",
    "SpawnFailureError",
    "UnsupportedLanguageError",
    "ValidationResult",
    "Validator",
    "require_code_and_language",
]
