from .config import ServiceConfig
from .execution import CodeExecutionService, ExecutionRequest, ExecutionResult, ValidationResult

__all__ = ["ServiceConfig", "CodeExecutionService", "ExecutionRequest", "ExecutionResult", "ValidationResult"]
