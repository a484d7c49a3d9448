from __future__ import annotations

from typing import Callable, Optional

from reticle_store.settings_store import SettingsStore

AfterFn = Callable[[int, Callable[[], None]], object]
AfterCancelFn = Callable[[object], None]
LoggerFn = Callable[..., None]

MIN_POLL_MS = 50


def _noop_log(message: str, *args: object) -> None:
    return None


class StoreChangeBridge:
    """Polls the shared medium so writes from other processes reach local subscribers."""

    def __init__(
        self,
        store: SettingsStore,
        *,
        after: AfterFn,
        after_cancel: AfterCancelFn,
        interval_ms: int = 250,
        logger: Optional[LoggerFn] = None,
    ) -> None:
        self._store = store
        self._after = after
        self._after_cancel = after_cancel
        self.interval_ms = max(MIN_POLL_MS, int(interval_ms))
        self._logger = logger or _noop_log
        self._handle: object | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> object:
        self.stop()
        self._handle = self._after(self.interval_ms, self._run_poll)
        self._log("Change bridge started: interval=%dms", self.interval_ms)
        return self._handle

    def stop(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            try:
                self._after_cancel(handle)
            except Exception:
                pass

    def poll(self) -> list[str]:
        if not self._store.needs_reload():
            return []
        changed = self._store.reload()
        if changed:
            self._log("Change bridge delivered %d external change(s): %s", len(changed), ", ".join(changed))
        return changed

    def _run_poll(self) -> None:
        self._handle = None
        try:
            self.poll()
        finally:
            self._handle = self._after(self.interval_ms, self._run_poll)

    def _log(self, message: str, *args: object) -> None:
        try:
            self._logger(message, *args)
        except Exception:
            pass
