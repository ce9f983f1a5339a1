"""Shared single-record store for the collapsed/expanded flag.

Sidebar instances share no memory; the store is their only rendezvous point.
It holds exactly one ``CollapseRecord`` and exposes a cheap revision marker
so pollers can skip reading when nothing changed.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Hashable, Protocol

from ..exceptions import PayloadError, StoreReadError, StoreWriteError
from ..models.collapse import CollapseRecord

logger = logging.getLogger(__name__)


class CollapseStore(Protocol):
    """Capability injected into ``CollapseSync``."""

    def revision(self) -> Hashable | None:
        """Opaque marker that changes on every write, None if nothing stored."""
        ...

    def read(self) -> CollapseRecord | None:
        """The stored record, or None if nothing has been written yet."""
        ...

    def write(self, record: CollapseRecord) -> None:
        """Atomically replace the stored record."""
        ...


class FileCollapseStore:
    """Record kept in a JSON file, replaced atomically on write.

    The revision is the file's (mtime_ns, inode) pair. Every write goes
    through a fresh temporary file renamed over the target, so the inode
    changes even when two writes land within the filesystem's timestamp
    granularity.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def revision(self) -> tuple[int, int] | None:
        try:
            stat_result = self.path.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreReadError("Failed to stat collapse record", path=str(self.path)) from e
        return (stat_result.st_mtime_ns, stat_result.st_ino)

    def read(self) -> CollapseRecord | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise StoreReadError("Corrupt collapse record", path=str(self.path)) from e
        except OSError as e:
            raise StoreReadError("Failed to read collapse record", path=str(self.path)) from e

        try:
            return CollapseRecord.from_json(text)
        except PayloadError as e:
            raise StoreReadError("Corrupt collapse record", path=str(self.path)) from e

    def write(self, record: CollapseRecord) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w") as f:
                f.write(record.to_json())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StoreWriteError("Failed to write collapse record", path=str(self.path)) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
        logger.debug("Wrote collapse record %s to %s", record, self.path)


class MemoryCollapseStore:
    """In-process store; several ``CollapseSync`` objects may share one."""

    def __init__(self, record: CollapseRecord | None = None):
        self._record = record
        self._revision = 0 if record is None else 1

    def revision(self) -> int | None:
        return self._revision if self._record is not None else None

    def read(self) -> CollapseRecord | None:
        return self._record

    def write(self, record: CollapseRecord) -> None:
        self._record = record
        self._revision += 1
