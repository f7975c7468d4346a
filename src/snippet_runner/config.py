from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def _default_config_path() -> Path:
    """Return bundled default runner config TOML path.

    Example:
        ```python
        path = _default_config_path()
        ```
    """
    return Path(__file__).with_name("default_config.toml")


def _read_config_toml(path: Path) -> dict[str, Any]:
    """Read runner config TOML and return the normalized settings dictionary.

    Example:
        ```python
        raw = _read_config_toml(Path("/tmp/runner.toml"))
        ```
    """
    if not path.exists():
        return {
            "scratch_dir": "/tmp/code-execution",
            "timeout_ms": 30000,
            "python_command": "python3",
            "node_command": "node",
        }
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    runner_obj = raw.get("runner", raw)
    if not isinstance(runner_obj, dict):
        raise ValueError("Runner config must be a TOML table")
    return runner_obj


def _non_empty_str(value: Any, field_name: str) -> str:
    """Validate a string setting that must not be blank.

    Example:
        ```python
        cmd = _non_empty_str("python3", "python_command")
        ```
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{field_name}' must be a non-empty string")
    return value.strip()


_DEFAULT_CONFIG_RAW = _read_config_toml(_default_config_path())
DEFAULT_SCRATCH_DIR = str(_DEFAULT_CONFIG_RAW.get("scratch_dir", "/tmp/code-execution"))
DEFAULT_TIMEOUT_MS = int(_DEFAULT_CONFIG_RAW.get("timeout_ms", 30000))
DEFAULT_PYTHON_COMMAND = str(_DEFAULT_CONFIG_RAW.get("python_command", "python3"))
DEFAULT_NODE_COMMAND = str(_DEFAULT_CONFIG_RAW.get("node_command", "node"))


@dataclass(slots=True)
class ServiceConfig:
    """Settings injected into the code execution service.

    Example:
        ```python
        config = ServiceConfig(scratch_dir="/tmp/runs", timeout_ms=5000)
        ```
    """

    scratch_dir: str = DEFAULT_SCRATCH_DIR
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    python_command: str = DEFAULT_PYTHON_COMMAND
    node_command: str = DEFAULT_NODE_COMMAND
    config_path: str | None = None

    def __post_init__(self) -> None:
        """Validate settings after dataclass initialization.

        Example:
            ```python
            ServiceConfig(timeout_ms=1000)
            ```
        """
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise ValueError("'timeout_ms' must be a positive integer")
        self.scratch_dir = _non_empty_str(self.scratch_dir, "scratch_dir")
        self.python_command = _non_empty_str(self.python_command, "python_command")
        self.node_command = _non_empty_str(self.node_command, "node_command")

    @classmethod
    def from_file(cls, config_path: str) -> "ServiceConfig":
        """Create a config instance from a TOML file.

        Example:
            ```python
            config = ServiceConfig.from_file("/etc/snippet-runner.toml")
            ```
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        raw = _read_config_toml(path)
        return cls(
            scratch_dir=raw.get("scratch_dir", DEFAULT_SCRATCH_DIR),
            timeout_ms=raw.get("timeout_ms", DEFAULT_TIMEOUT_MS),
            python_command=raw.get("python_command", DEFAULT_PYTHON_COMMAND),
            node_command=raw.get("node_command", DEFAULT_NODE_COMMAND),
            config_path=config_path,
        )
