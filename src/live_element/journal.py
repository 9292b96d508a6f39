"""Structured per-operation journal for waits and element actions."""

from __future__ import annotations

import collections
import json
import pathlib
import sys
import time
from typing import Any

from live_element.config import WaitConfig
from live_element.constants import JOURNAL_TAIL


class WaitJournal:
    """Append-only JSON-lines log.

    Entries are kept in a bounded in-memory tail and, when configured,
    appended to a file and echoed to stderr. The file is opened for each
    entry only, so journals shared between elements hold no handle.
    """

    def __init__(
        self,
        path: str | pathlib.Path | None = None,
        echo_stderr: bool = False,
        tail: int = JOURNAL_TAIL,
    ):
        self._log_path = pathlib.Path(path) if path else None
        self.echo_stderr = echo_stderr
        self._tail: collections.deque[dict[str, Any]] = collections.deque(maxlen=tail)
        self._seq = 0

    @classmethod
    def from_config(cls, config: WaitConfig) -> WaitJournal:
        return cls(config.journal_path, echo_stderr=config.journal_stderr)

    @property
    def path(self) -> pathlib.Path | None:
        return self._log_path

    def record(
        self,
        action: str,
        target: str,
        args: dict[str, Any] | None = None,
        result: Any = None,
        error: str | None = None,
        elapsed_ms: float | None = None,
    ) -> dict[str, Any]:
        self._seq += 1
        entry = {
            "seq": self._seq,
            "timestamp": time.time(),
            "action": action,
            "target": target,
            "args": args or {},
            "result": result,
            "error": error,
            "elapsed_ms": None if elapsed_ms is None else round(elapsed_ms, 1),
        }
        self._tail.append(entry)
        line = json.dumps(entry, ensure_ascii=False, default=str)
        if self._log_path is not None:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._log_path, "a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        if self.echo_stderr:
            print(line, file=sys.stderr)
        return entry

    def read_last_n(self, n: int = 20) -> list[dict[str, Any]]:
        if n <= 0:
            return []
        if self._log_path is not None and self._log_path.exists():
            lines = self._log_path.read_text(encoding="utf-8").strip().splitlines()
            return [json.loads(l) for l in lines[-n:]]
        return list(self._tail)[-n:]
