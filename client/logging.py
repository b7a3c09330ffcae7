import asyncio
import sys
from traceback import format_exception_only
from pathlib import Path
from typing import Final, Optional, Sequence

from models.activity_log import ActivityLog, LogAuthor, LogType, Severity

import aiofiles

__all__ = ('RECOVERABLE_ERRORS', 'Logger', 'make_log')

RECOVERABLE_ERRORS: Final[tuple[type[OSError], ...]] = (BlockingIOError,
                                                        InterruptedError,
                                                        TimeoutError)

MAX_DETAILS_LENGTH: Final[int] = 512

def make_log(logged_by: LogAuthor, log_category: LogType, details: Optional[str] = None,
             severity: Severity = Severity.INFO, user_concerned: Optional[str] = None) -> ActivityLog:
    '''Build an `ActivityLog`, truncating details that do not fit a single entry'''
    if details and len(details) > MAX_DETAILS_LENGTH:
        details = details[:MAX_DETAILS_LENGTH - 3] + '...'
    return ActivityLog(severity=severity,
                       logged_by=logged_by,
                       log_category=log_category,
                       log_details=details,
                       user_concerned=user_concerned[:128] if user_concerned else None)

class Logger:
    '''Batched, asynchronous activity logger appending JSON lines to a log file'''
    __slots__ = ('__weakref__',
                 '_log_queue', '_log_filepath', '_flush_task', '_pending_entries', '_stop_event',
                 '_batch_size', '_flush_interval', '_max_retries', '_waiting_period', '_shutdown_timeout')

    def __init__(self,
                 log_filepath: Path,
                 waiting_period: float,
                 batch_size: int,
                 flush_interval: float,
                 queue_size: int = 0,
                 max_retries: int = 3,
                 shutdown_timeout: float = 5.0):
        # Internal Timing
        self._batch_size: int = batch_size
        self._max_retries: int = max_retries
        self._flush_interval: float = flush_interval
        self._waiting_period: float = waiting_period
        self._shutdown_timeout: float = shutdown_timeout

        # Storage
        self._log_filepath: Final[Path] = log_filepath
        self._log_queue: Final[asyncio.Queue[ActivityLog]] = asyncio.Queue(maxsize=queue_size)
        self._flush_task: Optional[asyncio.Task[None]] = None
        self._pending_entries: Final[list[ActivityLog]] = []

        # Signalled by shutdown(), the flush loop exits at its next check
        self._stop_event: Final[asyncio.Event] = asyncio.Event()

    @property
    def log_filepath(self) -> Path:
        return self._log_filepath

    @property
    def batch_size(self) -> int:
        return self._batch_size
    @batch_size.setter
    def batch_size(self, value: int) -> None:
        if not isinstance(value, int) or (value <= 0):
            raise ValueError("Batch size must be a positive integer")
        self._batch_size = value

    @property
    def max_retries(self) -> int:
        return self._max_retries
    @max_retries.setter
    def max_retries(self, value: int) -> None:
        if not isinstance(value, int) or (value <= 0):
            raise ValueError("Max retries for failed logs must be a positive integer")
        self._max_retries = value

    @property
    def waiting_period(self) -> float:
        return self._waiting_period
    @waiting_period.setter
    def waiting_period(self, value: float) -> None:
        if not isinstance(value, (float, int)) or (value <= 0):
            raise ValueError("Log entry waiting period must be a positive fraction")
        self._waiting_period = value

    @property
    def flush_interval(self) -> float:
        return self._flush_interval
    @flush_interval.setter
    def flush_interval(self, value: float) -> None:
        if not isinstance(value, (float, int)) or (value <= 0):
            raise ValueError("Log flush interval must be a positive fraction")
        self._flush_interval = value

    @property
    def running(self) -> bool:
        return self._flush_task is not None and not self._flush_task.done()

    def start(self) -> None:
        '''Start the background flush task, must be called from within a running event loop'''
        if self.running:
            return
        self._stop_event.clear()
        self._flush_task = asyncio.create_task(self.flush_logs(), name='Activity Log Flush Task')

    async def enqueue_log(self, log: ActivityLog) -> None:
        try:
            await asyncio.wait_for(self._log_queue.put(log), timeout=self.waiting_period)
        except asyncio.TimeoutError:
            return

    async def _flush_batch(self, batch: Sequence[ActivityLog]) -> None:
        async with aiofiles.open(self._log_filepath, mode='a', encoding='utf-8') as log_file:
            await log_file.write(''.join(log_entry.model_dump_json() + '\n' for log_entry in batch))

    def _emit_meta_log(self, error: OSError) -> None:
        meta_log = make_log(LogAuthor.EXCEPTION_FALLBACK, LogType.INTERNAL,
                            ''.join(format_exception_only(error)).strip(),
                            severity=Severity.CRITICAL_FAILURE)
        print(meta_log.model_dump_json(), file=sys.stderr)

    async def _flush_with_retries(self, batch: list[ActivityLog]) -> None:
        for _ in range(self.max_retries):
            try:
                await self._flush_batch(batch)
                batch.clear()
                return
            except RECOVERABLE_ERRORS:
                await asyncio.sleep(self.waiting_period)
            except OSError as os_error:
                self._emit_meta_log(os_error)
                batch.clear()
                return

        # retries exhausted, drop intentionally
        batch.clear()

    async def _next_entry(self) -> Optional[ActivityLog]:
        '''Wait at most `waiting_period` for a queued entry, `None` on timeout or once stopping'''
        get_task: asyncio.Task[ActivityLog] = asyncio.ensure_future(self._log_queue.get())
        stop_task: asyncio.Task[bool] = asyncio.ensure_future(self._stop_event.wait())
        try:
            done, _ = await asyncio.wait({get_task, stop_task}, timeout=self.waiting_period,
                                         return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_task.cancel()
            if not get_task.done():
                get_task.cancel()

        if get_task in done:
            return get_task.result()
        return None

    async def flush_logs(self) -> None:
        log_entries: list[ActivityLog] = self._pending_entries
        while not self._stop_event.is_set():
            while len(log_entries) < self.batch_size:
                log_entry: Optional[ActivityLog] = await self._next_entry()
                if log_entry is None:
                    break
                log_entries.append(log_entry)

            if log_entries:
                await self._flush_with_retries(log_entries)

            stop_task: asyncio.Task[bool] = asyncio.ensure_future(self._stop_event.wait())
            try:
                await asyncio.wait({stop_task}, timeout=self.flush_interval)
            finally:
                stop_task.cancel()

    async def shutdown(self) -> None:
        '''Stop the flush task and write out whatever is still queued'''
        self._stop_event.set()
        if self._flush_task is not None:
            done, _ = await asyncio.wait({self._flush_task}, timeout=self._shutdown_timeout)
            if not done:
                self._flush_task.cancel()
            self._flush_task = None

        log_entries: list[ActivityLog] = self._pending_entries
        while not self._log_queue.empty():
            log_entries.append(self._log_queue.get_nowait())

        if log_entries:
            await self._flush_with_retries(log_entries)
