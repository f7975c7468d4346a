from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import ScratchWriteError
from .languages import LanguageSpec
from .types import ScratchFile

logger = logging.getLogger(__name__)


class ScratchFileManager:
    """Allocate and remove one uniquely named source file per call.

    Example:
        ```python
        manager = ScratchFileManager("/tmp/code-execution")
        with manager.scratch_file("print(1)", python_spec()) as scratch:
            print(scratch.path)
        ```
    """

    def __init__(self, scratch_dir: str | Path) -> None:
        """Remember the scratch directory; nothing is created yet.

        Example:
            ```python
            manager = ScratchFileManager(Path("/tmp/runs"))
            ```
        """
        self._scratch_dir = Path(scratch_dir).expanduser()

    @property
    def scratch_dir(self) -> Path:
        """Return the directory scratch files are written to.

        Example:
            ```python
            print(manager.scratch_dir)
            ```
        """
        return self._scratch_dir

    def ensure_directory(self) -> None:
        """Create the scratch directory if absent; failures are logged only.

        Example:
            ```python
            manager.ensure_directory()
            ```
        """
        try:
            self._scratch_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("Failed to create scratch directory %s", self._scratch_dir)

    def acquire(self, code: str, spec: LanguageSpec) -> ScratchFile:
        """Write code to `<scratch-dir>/<random-id>.<ext>` and return its handle.

        Example:
            ```python
            scratch = manager.acquire("console.log(1)", javascript_spec())
            ```
        """
        path = self._scratch_dir / f"{uuid.uuid4()}.{spec.extension}"
        try:
            with path.open("x", encoding="utf-8") as fh:
                fh.write(code)
        except FileExistsError as exc:
            raise ScratchWriteError(path, exc) from exc
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise ScratchWriteError(path, exc) from exc
        logger.debug("Wrote scratch file %s", path)
        return ScratchFile(path=path, extension=spec.extension)

    def release(self, scratch: ScratchFile) -> None:
        """Remove a scratch file; never raises and tolerates repeated calls.

        Example:
            ```python
            manager.release(scratch)
            ```
        """
        try:
            scratch.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to clean up scratch file %s: %s", scratch.path, exc)

    @contextmanager
    def scratch_file(self, code: str, spec: LanguageSpec) -> Iterator[ScratchFile]:
        """Acquire a scratch file for the duration of a `with` block.

        Example:
            ```python
            with manager.scratch_file("print(1)", python_spec()) as scratch:
                ...
            ```
        """
        scratch = self.acquire(code, spec)
        try:
            yield scratch
        finally:
            self.release(scratch)
