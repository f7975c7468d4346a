from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from functools import partial
from pathlib import Path
from typing import Any, Never, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich_argparse import RawTextRichHelpFormatter
from snippet_runner import CodeExecutionService, ExecutionRequest, ServiceConfig
from snippet_runner.execution import ExecutionResult, LanguageTable, ValidationResult

_CONSOLE = Console(no_color=False)
_ERR_CONSOLE = Console(stderr=True)


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m snr")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(2)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for running and validating code snippets.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m snr",
        description=(
            "snippet-runner CLI\n"
            "Run or syntax-check a source file in a throwaway interpreter process.\n"
            "Code runs with the host's permissions; this is not an isolation boundary."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m snr run hello.py\n"
            "  python -m snr run - --language js < script.js\n"
            "  python -m snr validate broken.py --json\n"
            "  python -m snr languages"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--config",
        help=(
            "Path to a runner TOML config.\n"
            "Keys: scratch_dir, timeout_ms, python_command, node_command."
        ),
    )
    parser.add_argument(
        "--scratch-dir",
        help="Directory for scratch source files (overrides config).",
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        help="Wall-clock limit per process in milliseconds (overrides config).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    run_cmd = sub.add_parser(
        "run",
        help="Validate, then execute a source file.",
        description=(
            "Check syntax first, then run the file and print its output.\n"
            "Use `-` to read source from stdin."
        ),
        epilog=(
            "Examples:\n"
            "  python -m snr run hello.py\n"
            "  python -m snr run loop.py --timeout-ms 2000\n"
            "  python -m snr run app.js --no-validate --json"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    run_cmd.add_argument("source", help="Source file path, or `-` for stdin.")
    run_cmd.add_argument(
        "-l",
        "--language",
        help="Language identifier (default: inferred from the file extension).",
    )
    run_cmd.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip the syntax check before running.",
    )
    run_cmd.add_argument("--json", action="store_true", help="Print the JSON result.")

    validate_cmd = sub.add_parser(
        "validate",
        help="Syntax-check a source file without running it.",
        description="Run the interpreter's compile-only mode and report syntax errors.",
        formatter_class=_HELP_FORMATTER,
    )
    validate_cmd.add_argument("source", help="Source file path, or `-` for stdin.")
    validate_cmd.add_argument(
        "-l",
        "--language",
        help="Language identifier (default: inferred from the file extension).",
    )
    validate_cmd.add_argument("--json", action="store_true", help="Print the JSON result.")

    sub.add_parser(
        "languages",
        help="List supported languages.",
        description="Show the language dispatch table with aliases and commands.",
        formatter_class=_HELP_FORMATTER,
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    """Send library logs to stderr through Rich.

    Example:
        ```python
        _configure_logging(verbose=True)
        ```
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_ERR_CONSOLE, show_path=False)],
        force=True,
    )


def build_config(args: argparse.Namespace) -> ServiceConfig:
    """Create the service config from `--config` plus CLI overrides.

    Example:
        ```python
        config = build_config(args)
        ```
    """
    config = ServiceConfig.from_file(args.config) if args.config else ServiceConfig()
    overrides: dict[str, Any] = {}
    if args.scratch_dir:
        overrides["scratch_dir"] = args.scratch_dir
    if args.timeout_ms is not None:
        overrides["timeout_ms"] = args.timeout_ms
    return replace(config, **overrides)


def build_service(config: ServiceConfig) -> CodeExecutionService:
    """Create the execution service for a config.

    Example:
        ```python
        service = build_service(ServiceConfig())
        ```
    """
    return CodeExecutionService(config)


def _read_source(source: str) -> str:
    """Read source text from a path, or from stdin for `-`.

    Example:
        ```python
        code = _read_source("hello.py")
        ```
    """
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _resolve_language(args: argparse.Namespace, languages: LanguageTable) -> str | None:
    """Return the explicit language, or infer one from the file extension.

    Example:
        ```python
        language = _resolve_language(args, LanguageTable.default())
        ```
    """
    if args.language:
        return str(args.language)
    if args.source == "-":
        return None
    spec = languages.for_extension(Path(args.source).suffix)
    return spec.language.value if spec else None


def _print_validation(verdict: ValidationResult) -> None:
    """Render a validation verdict.

    Example:
        ```python
        _print_validation(ValidationResult(is_valid=True))
        ```
    """
    if verdict.is_valid:
        _CONSOLE.print(Panel.fit("Syntax OK", style="bold green"))
        return
    for message in verdict.errors:
        _CONSOLE.print(Panel(Text(message.rstrip()), title="Validation Error", border_style="red"))


def _print_result(result: ExecutionResult) -> None:
    """Render an execution result as output and error panels.

    Example:
        ```python
        _print_result(ExecutionResult(execution_time_ms=12, output="hi\\n"))
        ```
    """
    if result.output:
        _CONSOLE.print(Panel(Text(result.output.rstrip("\n")), title="Output", border_style="cyan"))
    if result.error:
        title = "Error" if result.error_kind else "Stderr"
        style = "red" if result.error_kind else "yellow"
        _CONSOLE.print(Panel(Text(result.error.rstrip("\n")), title=title, border_style=style))
    status = result.error_kind.value if result.error_kind else "ok"
    _CONSOLE.print(f"[bold]{status}[/bold] in {result.execution_time_ms}ms")


def _print_languages(languages: LanguageTable) -> None:
    """Render the language dispatch table.

    Example:
        ```python
        _print_languages(LanguageTable.default())
        ```
    """
    table = Table(title="Supported Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Aliases", style="magenta")
    table.add_column("Extension")
    table.add_column("Command")
    for spec in languages.specs():
        table.add_row(
            spec.language.value,
            ", ".join(languages.aliases_for(spec.language)),
            f".{spec.extension}",
            spec.command,
        )
    _CONSOLE.print(table)


async def _run(service: CodeExecutionService, code: str, language: str, validate: bool, as_json: bool) -> int:
    """Validate (optionally) and execute code, printing the outcome.

    Example:
        ```python
        code = asyncio.run(_run(service, "print(1)", "python", True, False))
        ```
    """
    if validate:
        verdict = await service.validate(code, language)
        if not verdict.is_valid:
            if as_json:
                print(json.dumps({"message": "Code validation failed", "errors": list(verdict.errors)}))
            else:
                _print_validation(verdict)
            return 1
    result = await service.execute(ExecutionRequest(code=code, language=language))
    if as_json:
        print(json.dumps(result.to_dict()))
    else:
        _print_result(result)
    return 0 if result.ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `snr` CLI command handler.

    Example:
        ```python
        code = main(["run", "hello.py"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    try:
        config = build_config(args)
    except (OSError, ValueError) as exc:
        _CONSOLE.print(Panel.fit(f"Invalid config: {exc}", style="bold red"))
        return 2

    if args.command == "languages":
        _print_languages(LanguageTable.from_config(config))
        return 0

    service = build_service(config)
    language = _resolve_language(args, service.languages)
    if language is None:
        parser.error("Could not infer language; pass --language")
    try:
        code = _read_source(args.source)
    except OSError as exc:
        _CONSOLE.print(Panel.fit(f"Cannot read {args.source}: {exc}", style="bold red"))
        return 2

    if args.command == "validate":
        verdict = asyncio.run(service.validate(code, language))
        if args.json:
            print(json.dumps(verdict.to_dict()))
        else:
            _print_validation(verdict)
        return 0 if verdict.is_valid else 1
    if args.command == "run":
        return asyncio.run(_run(service, code, language, not args.no_validate, args.json))

    parser.error("Unhandled command")
    return 2
