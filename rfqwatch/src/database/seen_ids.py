"""
Seen-ID store — the bounded dedup history shared by every source.

A JSON array of RFQ ids on disk, most recent first:

    ["7312345", "7312340", ...]

Rewritten in full after every successful add() so a crash loses at most the
record in flight.  Disk problems are logged and swallowed: the in-memory list
stays authoritative for the rest of the process, so a failed write never
blocks or duplicates a notification.
"""
import json
import os
from contextlib import suppress
from pathlib import Path

from loguru import logger


class SeenIdStore:
    """Insertion-ordered, capacity-bounded set of ids with FIFO eviction."""

    def __init__(self, path: Path, max_size: int = 90):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.path     = Path(path)
        self.max_size = max_size
        self._ids: list[str] = []

    # ── Persistence ────────────────────────────────────────────────────────────

    def load(self) -> None:
        """Replace the in-memory list with the file contents (empty on any problem)."""
        self._ids = []
        if not self.path.exists():
            logger.info(f"[SeenIds] no history at {self.path}, starting empty")
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"[SeenIds] could not read {self.path}: {exc}")
            return
        if not isinstance(data, list):
            logger.warning(f"[SeenIds] {self.path} is not a JSON array, ignoring it")
            return

        ids = [str(item) for item in data if item]
        if len(ids) > self.max_size:
            logger.debug(f"[SeenIds] trimming loaded history {len(ids)} → {self.max_size}")
            ids = ids[: self.max_size]
        self._ids = ids
        logger.info(f"[SeenIds] loaded {len(self._ids)} ids from {self.path}")

    def save(self) -> bool:
        """
        Write the full list to disk. Returns False (and logs) on failure.

        The JSON goes to a sibling .tmp file first and is swapped in with
        os.replace, so the live file is always either the old or the new list.
        """
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(self._ids, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            os.replace(tmp, self.path)
            return True
        except OSError as exc:
            logger.error(f"[SeenIds] could not write {self.path}: {exc}")
            with suppress(OSError):
                tmp.unlink()
            return False

    # ── Set operations ─────────────────────────────────────────────────────────

    def exists(self, id_: str) -> bool:
        return id_ in self._ids

    def add(self, id_: str) -> bool:
        """
        Record `id_` as most recent. Returns False when it was already present
        (left where it is, not moved) or empty; True after inserting.
        """
        if not id_ or self.exists(id_):
            return False
        self._ids.insert(0, id_)
        if len(self._ids) > self.max_size:
            self._ids.pop()
        self.save()
        return True

    @property
    def ids(self) -> list[str]:
        """Snapshot of the stored ids, most recent first."""
        return list(self._ids)

    def __contains__(self, id_: str) -> bool:
        return self.exists(id_)

    def __len__(self) -> int:
        return len(self._ids)
