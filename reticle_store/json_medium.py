"""Storage media backing the settings store."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

_LOGGER = logging.getLogger("ReticleOverlay.Store")


class StorageMedium(Protocol):
    """Durable key/value facility shared by every window that uses the store."""

    def read_all(self) -> Dict[str, Any]: ...
    def write_all(self, data: Mapping[str, Any]) -> None: ...
    def stamp(self) -> Optional[object]: ...


class MemoryMedium:
    """In-process medium; several stores may share one instance."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})
        self._generation = 0

    def read_all(self) -> Dict[str, Any]:
        return dict(self._data)

    def write_all(self, data: Mapping[str, Any]) -> None:
        self._data = dict(data)
        self._generation += 1

    def stamp(self) -> Optional[object]:
        return self._generation


class JsonFileMedium:
    """Persists the whole key/value map as a single JSON object."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read_all(self) -> Dict[str, Any]:
        try:
            raw_text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            _LOGGER.warning("Failed to read settings from %s: %s", self._path, exc)
            return {}
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            _LOGGER.warning("Settings file %s is not valid JSON; starting empty (%s)", self._path, exc)
            return {}
        if not isinstance(data, dict):
            _LOGGER.warning("Settings file %s is not a JSON object; starting empty", self._path)
            return {}
        return data

    def write_all(self, data: Mapping[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(dict(data), handle, indent=2)
            os.replace(tmp_name, self._path)
        except Exception:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    def stamp(self) -> Optional[object]:
        try:
            stat = self._path.stat()
        except OSError:
            return None
        # os.replace swaps the inode, so same-size writes within one mtime tick differ.
        return (stat.st_ino, stat.st_mtime_ns, stat.st_size)
