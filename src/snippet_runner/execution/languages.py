from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import UnsupportedLanguageError

if TYPE_CHECKING:
    from ..config import ServiceConfig

FILE_PLACEHOLDER = "{file}"

# Compiles the file without running it and without writing bytecode next to it.
_PYTHON_SYNTAX_CHECK = (
    "import sys\n"
    "with open(sys.argv[1], encoding='utf-8') as fh:\n"
    "    compile(fh.read(), sys.argv[1], 'exec')\n"
)


class Language(str, Enum):
    """Closed set of languages the runner can dispatch.

    Example:
        ```python
        lang = Language.PYTHON
        ```
    """

    PYTHON = "python"
    JAVASCRIPT = "javascript"


_ALIASES: dict[str, Language] = {
    "python": Language.PYTHON,
    "python3": Language.PYTHON,
    "py": Language.PYTHON,
    "javascript": Language.JAVASCRIPT,
    "js": Language.JAVASCRIPT,
    "node": Language.JAVASCRIPT,
}


def normalize_language(name: str) -> Language | None:
    """Map a user-supplied language identifier onto a `Language`, or None.

    Example:
        ```python
        assert normalize_language(" JS ") is Language.JAVASCRIPT
        ```
    """
    return _ALIASES.get(name.strip().lower())


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    """How to write, run, and syntax-check source for one language.

    Example:
        ```python
        spec = LanguageSpec(Language.JAVASCRIPT, "js", "node", ("{file}",), ("--check", "{file}"))
        ```
    """

    language: Language
    extension: str
    command: str
    run_args: tuple[str, ...]
    check_args: tuple[str, ...]

    def run_argv(self, path: Path) -> list[str]:
        """Expand the execution argument template for a scratch file.

        Example:
            ```python
            args = spec.run_argv(Path("/tmp/code-execution/abc.py"))
            ```
        """
        return _expand(self.run_args, path)

    def check_argv(self, path: Path) -> list[str]:
        """Expand the syntax-check argument template for a scratch file.

        Example:
            ```python
            args = spec.check_argv(Path("/tmp/code-execution/abc.js"))
            ```
        """
        return _expand(self.check_args, path)


def _expand(template: tuple[str, ...], path: Path) -> list[str]:
    """Substitute the scratch file path into an argument template.

    Example:
        ```python
        argv = _expand(("--check", "{file}"), Path("/tmp/a.js"))
        ```
    """
    return [arg.replace(FILE_PLACEHOLDER, str(path)) for arg in template]


def python_spec(command: str = "python3") -> LanguageSpec:
    """Return the dispatch entry for Python.

    Example:
        ```python
        spec = python_spec("/usr/bin/python3.12")
        ```
    """
    return LanguageSpec(
        language=Language.PYTHON,
        extension="py",
        command=command,
        run_args=(FILE_PLACEHOLDER,),
        check_args=("-c", _PYTHON_SYNTAX_CHECK, FILE_PLACEHOLDER),
    )


def javascript_spec(command: str = "node") -> LanguageSpec:
    """Return the dispatch entry for JavaScript on Node.js.

    Example:
        ```python
        spec = javascript_spec("node")
        ```
    """
    return LanguageSpec(
        language=Language.JAVASCRIPT,
        extension="js",
        command=command,
        run_args=(FILE_PLACEHOLDER,),
        check_args=("--check", FILE_PLACEHOLDER),
    )


class LanguageTable:
    """Dispatch table from language identifiers to `LanguageSpec` entries.

    Example:
        ```python
        table = LanguageTable.default()
        spec = table.resolve("node")
        ```
    """

    def __init__(self, specs: list[LanguageSpec]) -> None:
        """Index the given specs by language.

        Example:
            ```python
            table = LanguageTable([python_spec()])
            ```
        """
        self._specs = {spec.language: spec for spec in specs}

    @classmethod
    def default(cls) -> "LanguageTable":
        """Return the table with stock `python3` and `node` commands.

        Example:
            ```python
            table = LanguageTable.default()
            ```
        """
        return cls([python_spec(), javascript_spec()])

    @classmethod
    def from_config(cls, config: "ServiceConfig") -> "LanguageTable":
        """Return the table using the interpreter commands from a config.

        Example:
            ```python
            table = LanguageTable.from_config(ServiceConfig(python_command=sys.executable))
            ```
        """
        return cls([python_spec(config.python_command), javascript_spec(config.node_command)])

    def lookup(self, name: str) -> LanguageSpec | None:
        """Return the entry for a language identifier, or None when unknown.

        Example:
            ```python
            spec = table.lookup("ruby")  # None
            ```
        """
        language = normalize_language(name)
        if language is None:
            return None
        return self._specs.get(language)

    def resolve(self, name: str) -> LanguageSpec:
        """Return the entry for a language identifier or raise `UnsupportedLanguageError`.

        Example:
            ```python
            spec = table.resolve("Python")
            ```
        """
        spec = self.lookup(name)
        if spec is None:
            raise UnsupportedLanguageError(name)
        return spec

    def for_extension(self, extension: str) -> LanguageSpec | None:
        """Return the entry whose scratch extension matches, or None.

        Example:
            ```python
            spec = table.for_extension(".js")
            ```
        """
        wanted = extension.lower().lstrip(".")
        for spec in self._specs.values():
            if spec.extension == wanted:
                return spec
        return None

    def specs(self) -> list[LanguageSpec]:
        """Return all entries in declaration order.

        Example:
            ```python
            names = [spec.language.value for spec in table.specs()]
            ```
        """
        return list(self._specs.values())

    def aliases_for(self, language: Language) -> list[str]:
        """Return every accepted identifier for a language.

        Example:
            ```python
            assert "js" in table.aliases_for(Language.JAVASCRIPT)
            ```
        """
        return [alias for alias, target in _ALIASES.items() if target is language]
