"""
Append-only lead log.

Each lead is one JSON object per line. Appends within a process are serialized
by a lock, and every record is emitted with a single ``write()`` on a file
opened in append mode so concurrent writers never interleave partial lines.
"""

from __future__ import annotations

import asyncio
import os
import threading
from pathlib import Path

import structlog

from app.shared.core.exceptions import LeadLogCorruptError, LeadStorageUnavailableError
from app.schemas.leads import LeadAck, LeadRecord, utc_timestamp

logger = structlog.get_logger()


class LeadRecorder:
    """Durable, append-only store for lead records. Duplicates are appended as-is."""

    def __init__(self, path: str | Path, *, fsync: bool = True):
        self.path = Path(path)
        self.fsync = fsync
        self._lock = threading.Lock()

    async def record(self, entry: LeadRecord) -> LeadAck:
        """
        Stamp ``entry`` with the current time and append it to the log.

        Raises:
            LeadStorageUnavailableError: the log could not be written.
        """
        stamped = entry.model_copy(update={"timestamp": utc_timestamp()})
        line = stamped.to_line()
        written = await asyncio.to_thread(self._append, line)
        logger.info(
            "lead_recorded",
            path=str(self.path),
            bytes_written=written,
            process_count=len(stamped.processes),
        )
        return LeadAck(timestamp=stamped.timestamp, bytes_written=written)

    def _append(self, line: str) -> int:
        data = line.encode("utf-8")
        try:
            with self._lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd = os.open(self.path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o640)
                try:
                    written = os.write(fd, data)
                    if written != len(data):
                        raise OSError(
                            f"short write to lead log ({written} of {len(data)} bytes)"
                        )
                    if self.fsync:
                        os.fsync(fd)
                finally:
                    os.close(fd)
        except OSError as exc:
            raise LeadStorageUnavailableError(
                "Lead log is not writable",
                details={"path": str(self.path), "reason": exc.strerror or str(exc)},
            ) from exc
        return written

    def read_all(self) -> list[LeadRecord]:
        """Every record in append order. A missing log reads as empty."""
        if not self.path.exists():
            return []
        records: list[LeadRecord] = []
        try:
            with self._lock, self.path.open("r", encoding="utf-8") as handle:
                for line_number, line in enumerate(handle, start=1):
                    if not line.strip():
                        continue
                    try:
                        records.append(LeadRecord.from_line(line))
                    except ValueError as exc:
                        raise LeadLogCorruptError(
                            f"Lead log line {line_number} is not a valid record",
                            line_number=line_number,
                        ) from exc
        except OSError as exc:
            raise LeadStorageUnavailableError(
                "Lead log is not readable",
                details={"path": str(self.path), "reason": exc.strerror or str(exc)},
            ) from exc
        return records

    def is_writable(self) -> bool:
        """Whether the nearest existing ancestor of the log path accepts writes."""
        if self.path.exists():
            return self.path.is_file() and os.access(self.path, os.W_OK)
        candidate = self.path.parent
        while not candidate.exists():
            if candidate.parent == candidate:
                return False
            candidate = candidate.parent
        return candidate.is_dir() and os.access(candidate, os.W_OK)


_recorder: LeadRecorder | None = None


def get_lead_recorder() -> LeadRecorder:
    """FastAPI dependency returning the process-wide recorder for LEADS_FILE_PATH."""
    global _recorder
    from app.shared.core.config import get_settings

    settings = get_settings()
    path = Path(settings.LEADS_FILE_PATH)
    if _recorder is None or _recorder.path != path:
        _recorder = LeadRecorder(path, fsync=settings.LEADS_FSYNC)
    return _recorder
