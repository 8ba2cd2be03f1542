"""Ephemeral file artifacts for code blocks too large to inline.

``ArtifactStore`` owns one directory. Every artifact it creates is deleted
after a grace period whether or not the message carrying it was sent, which
bounds disk use when sends fail. Deletion failures never raise; they become
``CleanupError`` reports on the error monitor and the ``on_cleanup_error``
hook so leaks show up in tests and in logs.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from courier.channels.delivery.types import DEFAULT_ARTIFACT_TTL_SECONDS
from courier.core.errors import ArtifactError, CleanupError
from courier.core.logging import ErrorMonitor, error_monitor, get_logger

_log = get_logger("channels.delivery.artifacts")

ARTIFACT_PREFIX = "code_"

# Language tag -> file extension, unknown tags fall back to .txt
FILE_EXTENSIONS = {
    "javascript": "js",
    "js": "js",
    "typescript": "ts",
    "ts": "ts",
    "python": "py",
    "py": "py",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "csharp": "cs",
    "php": "php",
    "ruby": "rb",
    "go": "go",
    "rust": "rs",
    "swift": "swift",
    "kotlin": "kt",
    "sql": "sql",
    "html": "html",
    "css": "css",
    "json": "json",
    "xml": "xml",
    "yaml": "yml",
    "markdown": "md",
    "bash": "sh",
    "shell": "sh",
    "sh": "sh",
    "powershell": "ps1",
    "mermaid": "mmd",
}

CleanupHook = Callable[[CleanupError], None]


def language_extension(language: str) -> str:
    return FILE_EXTENSIONS.get(language.strip().lower(), "txt")


@dataclass(frozen=True)
class FileArtifact:
    """A file on disk that a transport can attach to a message."""

    path: Path
    filename: str
    description: str = ""


class ArtifactStore:
    """Creates code artifacts in ``root`` and deletes them after ``ttl_seconds``."""

    def __init__(
        self,
        root: Path | str,
        *,
        ttl_seconds: float = DEFAULT_ARTIFACT_TTL_SECONDS,
        on_cleanup_error: CleanupHook | None = None,
        monitor: ErrorMonitor | None = None,
    ) -> None:
        self._root = Path(root)
        self._ttl = ttl_seconds
        self._on_cleanup_error = on_cleanup_error
        self._monitor = monitor or error_monitor
        self._pending: dict[Path, asyncio.Task[None]] = {}

    @property
    def root(self) -> Path:
        return self._root

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _new_filename(self, language: str) -> str:
        stamp = int(time.time() * 1000)
        return f"{ARTIFACT_PREFIX}{stamp}_{uuid.uuid4().hex[:6]}.{language_extension(language)}"

    @staticmethod
    def _write(path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")

    async def create(self, body: str, language: str) -> FileArtifact:
        """Write ``body`` to a new file and schedule its deletion.

        Raises:
            ArtifactError: The file could not be written.
        """
        filename = self._new_filename(language)
        path = self._root / filename
        try:
            await asyncio.to_thread(self._write, path, body)
        except OSError as e:
            raise ArtifactError(
                f"Failed to write code artifact {filename}: {e}", language=language
            ) from e

        artifact = FileArtifact(
            path=path,
            filename=filename,
            description=f"Code snippet ({language or 'text'})",
        )
        self._pending[path] = asyncio.get_running_loop().create_task(self._expire(artifact))
        _log.debug("Artifact created", file=filename, length=len(body), ttl=self._ttl)
        return artifact

    async def _expire(self, artifact: FileArtifact) -> None:
        await asyncio.sleep(self._ttl)
        await self.cleanup(artifact)

    @staticmethod
    def _unlink(path: Path) -> None:
        path.unlink(missing_ok=True)

    async def cleanup(self, artifact: FileArtifact) -> bool:
        """Delete ``artifact`` now. Returns False if deletion failed."""
        task = self._pending.pop(artifact.path, None)
        if task is not None and task is not asyncio.current_task():
            task.cancel()

        try:
            await asyncio.to_thread(self._unlink, artifact.path)
        except OSError as e:
            self._report(CleanupError(
                f"Failed to delete artifact {artifact.filename}: {e}",
                path=str(artifact.path),
            ))
            return False

        _log.debug("Artifact cleaned up", file=artifact.filename)
        return True

    def _report(self, error: CleanupError) -> None:
        _log.warning("Artifact cleanup failed", path=error.path, error=error.message)
        self._monitor.record("cleanup", error.message)
        if self._on_cleanup_error is not None:
            self._on_cleanup_error(error)

    async def aclose(self) -> None:
        """Cancel pending timers and delete every outstanding artifact now."""
        paths = list(self._pending)
        for path in paths:
            await self.cleanup(FileArtifact(path=path, filename=path.name))

    def sweep_orphans(self, max_age_seconds: float) -> int:
        """Delete artifacts older than ``max_age_seconds`` left by a previous run."""
        if not self._root.exists():
            return 0

        now = time.time()
        deleted = 0
        for p in self._root.iterdir():
            if not p.name.startswith(ARTIFACT_PREFIX) or p in self._pending:
                continue
            try:
                age = now - p.stat().st_mtime
                if age >= max_age_seconds:
                    p.unlink(missing_ok=True)
                    _log.info("Cleaned orphaned artifact", file=p.name, age_seconds=int(age))
                    deleted += 1
            except FileNotFoundError:
                pass
            except OSError as e:
                self._report(CleanupError(
                    f"Failed to delete orphaned artifact {p.name}: {e}", path=str(p)
                ))
        return deleted
