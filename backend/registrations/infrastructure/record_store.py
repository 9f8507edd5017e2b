"""Record Store - sole owner of the registration dataset and its persisted file.

Invariants:
    - One asyncio.Lock is the critical section: create, update_status, delete_by_id and
      reload run one at a time, each seeing every mutation ordered before it
    - The lock is held across the whole read-modify-write-persist cycle, file IO included
    - The published snapshot is an immutable tuple, replaced only AFTER the atomic
      write succeeds: readers never observe a half-applied or unpersisted mutation
    - Duplicate check and insert happen inside the same critical section
    - A mutation that has started is finished even if its caller is cancelled
    - All OS/codec failures surface as PersistenceError; the file is never half-written

Design Decisions:
    - In-memory snapshot is the source of truth, loaded once by open(); the file is the
      durability layer rewritten in full on every mutation
    - File IO runs in a worker thread (asyncio.to_thread) so readers keep being served
    - Mutations are shielded tasks: cancellation cannot split "written" from "published"
    - One instance per process, built by the app lifespan and injected into routes;
      several worker processes writing one file are NOT supported
"""

import asyncio
import logging
import uuid
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence, TypeVar

from openpyxl.utils.exceptions import InvalidFileException

from registrations.core.domain_types import RecordId
from registrations.core.errors import (
    DuplicateError, ErrorContext, NotFoundError, PersistenceError,
)
from registrations.core.query import QueryResult, RecordQuery, query_records
from registrations.core.registration import (
    NewRegistration, Registration, build_registration, find_duplicate,
)
from registrations.core.stats import compute_stats
from registrations.infrastructure.atomic_write import (
    AtomicWriteError, atomic_write_bytes,
)
from registrations.infrastructure.observability import log_duration
from registrations.infrastructure.workbook_codec import (
    DEFAULT_SHEET_NAME, decode_dataset, encode_dataset,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Records = tuple[Registration, ...]
# A mutation receives the current snapshot and returns (next snapshot | None, result).
# None means "nothing changed, do not rewrite the file".
Mutation = Callable[[Records], tuple[Records | None, T]]

_MAX_ID_ATTEMPTS = 5
_READ_ERRORS = (OSError, zipfile.BadZipFile, InvalidFileException, KeyError, ValueError)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_record_id() -> RecordId:
    return RecordId(str(uuid.uuid4()))


class RecordStore:
    """Mutex-guarded registration dataset with atomic whole-file persistence."""

    def __init__(
        self,
        path: Path | str,
        sheet_name: str = DEFAULT_SHEET_NAME,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], RecordId] = _new_record_id,
    ):
        self._path = Path(path)
        self._sheet_name = sheet_name
        self._clock = clock
        self._id_factory = id_factory
        self._lock = asyncio.Lock()
        self._records: Records = ()
        self._opened = False

    # ─── Lifecycle ───────────────────────────────────────────────

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def record_count(self) -> int:
        return len(self._records)

    async def open(self) -> None:
        """Load the persisted dataset. A missing file is an empty dataset."""
        await self.reload()
        logger.info(
            "Record store opened",
            extra={"path": str(self._path), "record_count": len(self._records)},
        )

    async def reload(self) -> None:
        """Re-read the file under the write lock and publish what is on disk."""
        async with self._lock:
            self._records = tuple(await asyncio.to_thread(self._read))
            self._opened = True

    async def health_check(self) -> bool:
        """Readiness: opened, and the dataset directory is reachable."""
        if not self._opened:
            return False
        try:
            return await asyncio.to_thread(self._path.parent.is_dir)
        except OSError as e:
            logger.error(f"Dataset health check failed: {e}")
            return False

    # ─── Reads (lock-free, immutable snapshot) ───────────────────

    def snapshot(self) -> Records:
        return self._records

    def find_duplicate(self, email: str, phone: str) -> Registration | None:
        match = find_duplicate(self._records, email, phone)
        return match[0] if match else None

    def list_records(self, query: RecordQuery | None = None) -> QueryResult:
        return query_records(self._records, query)

    def stats(self) -> dict:
        return compute_stats(self._records)

    # ─── Mutations (serialized) ──────────────────────────────────

    async def create(self, new: NewRegistration) -> Registration:
        """Check uniqueness and insert atomically. Raises DuplicateError."""

        def mutation(current: Records) -> tuple[Records, Registration]:
            match = find_duplicate(current, new.email, new.phone)
            if match:
                raise DuplicateError(match[1])
            record = build_registration(
                new,
                record_id=self._allocate_id(current),
                registered_at=self._clock(),
            )
            return current + (record,), record

        record = await self._mutate("create", mutation)
        logger.info(
            "Registration created",
            extra={"record_id": record.id, "record_count": len(self._records)},
        )
        return record

    async def update_status(
        self, record_id: RecordId, fields: Mapping[str, Any],
    ) -> Registration:
        """Apply recognized status fields. Empty/unknown fields are a no-op."""

        def mutation(current: Records) -> tuple[Records | None, Registration]:
            index = self._index_of(current, record_id)
            existing = current[index]
            updated = existing.with_statuses(fields)
            if updated == existing:
                return None, existing
            return current[:index] + (updated,) + current[index + 1:], updated

        record = await self._mutate("update_status", mutation)
        logger.info("Registration status updated", extra={"record_id": record_id})
        return record

    async def delete_by_id(self, record_id: RecordId) -> bool:
        """Remove permanently. Raises NotFoundError if absent."""

        def mutation(current: Records) -> tuple[Records, bool]:
            index = self._index_of(current, record_id)
            return current[:index] + current[index + 1:], True

        deleted = await self._mutate("delete", mutation)
        logger.info(
            "Registration deleted",
            extra={"record_id": record_id, "record_count": len(self._records)},
        )
        return deleted

    # ─── Internals ───────────────────────────────────────────────

    async def _mutate(self, operation: str, mutation: Mutation[T]) -> T:
        """Run `mutation` inside the critical section as a shielded task."""
        task = asyncio.ensure_future(self._locked_mutation(operation, mutation))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # Nobody is left to re-raise a failure; the task logs it itself.
            task.add_done_callback(self._log_orphaned_failure)
            raise

    async def _locked_mutation(self, operation: str, mutation: Mutation[T]) -> T:
        async with self._lock:
            if not self._opened:
                raise PersistenceError(operation, "record store is not open")
            next_records, result = mutation(self._records)
            if next_records is not None:
                await asyncio.to_thread(self._write, next_records, operation)
                self._records = next_records
            return result

    @staticmethod
    def _log_orphaned_failure(task: "asyncio.Future[Any]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if isinstance(exc, PersistenceError):
            logger.error(
                f"Dataset {exc.operation} failed: {exc.detail}",
                extra={"error_code": exc.code, "operation": exc.operation},
            )

    def _allocate_id(self, current: Sequence[Registration]) -> RecordId:
        taken = {r.id for r in current}
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate
        raise PersistenceError("create", "could not allocate a unique record id")

    @staticmethod
    def _index_of(current: Sequence[Registration], record_id: RecordId) -> int:
        for index, record in enumerate(current):
            if record.id == record_id:
                return index
        raise NotFoundError(record_id)

    def _read(self) -> list[Registration]:
        if not self._path.exists():
            return []
        try:
            return decode_dataset(self._path.read_bytes(), self._sheet_name)
        except _READ_ERRORS as e:
            logger.error(
                f"Failed to read dataset: {e}",
                extra={"path": str(self._path), "operation": "read"},
            )
            raise PersistenceError(
                "read", str(e), ErrorContext(debug_info={"path": str(self._path)}),
            ) from e

    def _write(self, records: Records, operation: str) -> None:
        try:
            with log_duration(
                logger, "Dataset written",
                operation=operation, record_count=len(records),
            ):
                atomic_write_bytes(
                    self._path, encode_dataset(records, self._sheet_name),
                )
        except (AtomicWriteError, OSError, ValueError) as e:
            raise PersistenceError(
                operation, str(e),
                ErrorContext(debug_info={"path": str(self._path)}),
            ) from e
