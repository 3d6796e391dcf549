"""File helpers for the YAML store: an inter-process lock and atomic writes."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Any, Optional

import yaml

from .constants import WINDOWS_LOCK_BYTES

if os.name == "nt":
    import msvcrt
else:
    import fcntl


class FileLock:
    """Exclusive advisory lock on a sidecar file, held for a ``with`` block.

    Blocks until the lock is free. On Windows the first
    ``WINDOWS_LOCK_BYTES`` bytes of the lock file are locked instead.
    """

    def __init__(self, lock_path: Path) -> None:
        self.lock_path = lock_path
        self._handle: Optional[IO[str]] = None

    @property
    def held(self) -> bool:
        return self._handle is not None

    def _acquire(self, handle: IO[str]) -> None:
        if os.name == "nt":
            handle.seek(0)
            handle.truncate(WINDOWS_LOCK_BYTES)
            handle.flush()
            msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, WINDOWS_LOCK_BYTES)
        else:
            fcntl.flock(handle, fcntl.LOCK_EX)

    def _release(self, handle: IO[str]) -> None:
        if os.name == "nt":
            handle.seek(0)
            msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, WINDOWS_LOCK_BYTES)
        else:
            fcntl.flock(handle, fcntl.LOCK_UN)

    def __enter__(self) -> "FileLock":
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(self.lock_path, "a+")
        try:
            self._acquire(handle)
        except OSError:
            handle.close()
            raise
        self._handle = handle
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            self._release(handle)
        finally:
            handle.close()


def load_yaml_with_error(
    path: Path,
    default: dict[str, Any],
) -> tuple[dict[str, Any], str | None]:
    """Read a YAML mapping from *path*.

    Returns ``(data, None)`` on success and ``(default, message)`` when the file
    cannot be read or does not hold a mapping. A missing or empty file yields
    ``(default, None)``, so callers can tell a fresh store from a corrupt one
    and avoid writing over the latter.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return default, None
    except OSError as exc:
        return default, f"{path.name}: cannot read ({exc})"
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        return default, f"{path.name}: YAMLError: {exc}"
    if data is None:
        return default, None
    if isinstance(data, dict):
        return data, None
    return default, f"{path.name}: expected object, got {type(data).__name__}"


def atomic_write_yaml(path: Path, data: dict[str, Any]) -> None:
    """Write *data* beside *path* and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.parent / f".{path.name}.tmp"
    text = yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)
    with open(staging, "w", encoding="utf-8") as handle:
        handle.write(text)
        handle.flush()
        os.fsync(handle.fileno())
    os.replace(staging, path)
