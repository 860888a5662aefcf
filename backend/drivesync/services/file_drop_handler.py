"""
File Drop Handler - synchronizes files dropped in a local directory to the remote drive.

The drop directory is scanned at a fixed interval. New files are queued once
and drained strictly one at a time by a single worker. A file that fails to
upload is moved to the quarantine directory and never retried automatically.
"""
import asyncio
from collections import deque
from pathlib import Path
from typing import Awaitable, Callable, Deque, Dict, List, Optional

from ..core.logging_config import get_logger

logger = get_logger(__name__)

Uploader = Callable[[Path], Awaitable[None]]


class FileDropHandler:
    """
    Queue and single worker for the drop directory.

    All state is mutated from the event loop only: the scan step appends to the
    queue, the drain step pops from it and owns `current`.
    """

    def __init__(
        self,
        drop_directory: Path,
        uploader: Uploader,
        failed_directory: Optional[Path] = None,
        interval_seconds: float = 10.0
    ):
        """
        Initialize the handler and create the drop and quarantine directories.

        Args:
            drop_directory: Directory polled for dropped files
            uploader: Coroutine function uploading one dropped file, raising on failure
            failed_directory: Quarantine directory (defaults to <drop_directory>/failed)
            interval_seconds: Time between two scans
        """
        self.drop_directory = Path(drop_directory)
        self.failed_directory = Path(failed_directory) if failed_directory else self.drop_directory / "failed"
        self.uploader = uploader
        self.interval_seconds = interval_seconds

        self.queue: Deque[str] = deque()
        self.current: Optional[str] = None  # name of the file being processed

        self.stats = {
            "uploaded": 0,
            "failed": 0
        }

        self._stop_event = asyncio.Event()
        self._loop_task: Optional[asyncio.Task] = None
        self._drain_task: Optional[asyncio.Task] = None

        for directory in (self.drop_directory, self.failed_directory):
            directory.mkdir(parents=True, exist_ok=True)

    @property
    def is_handling(self) -> bool:
        return self.current is not None

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def add_to_queue(self, file_name: str) -> bool:
        """Queue a file unless it is already queued or being processed."""
        if file_name == self.current or file_name in self.queue:
            return False
        self.queue.append(file_name)
        return True

    def list_dropped_files(self) -> List[str]:
        """Names of the regular, non-hidden files in the drop directory, sorted by name."""
        return sorted(
            entry.name
            for entry in self.drop_directory.iterdir()
            if entry.is_file() and not entry.name.startswith(".")
        )

    async def listen(self) -> int:
        """
        Scan the drop directory once and queue new files.

        Starts draining the queue when it holds files and no drain is running,
        which includes files left queued by an earlier stop(). Returns the
        number of newly queued files.
        """
        logger.debug(f"Checking {self.drop_directory} for new dropped files.")
        new_file_count = sum(1 for name in self.list_dropped_files() if self.add_to_queue(name))
        if new_file_count:
            logger.info(f"Added {new_file_count} new file(s) to the queue.")
        else:
            logger.debug("No new files detected")
        if self.queue:
            self._schedule_drain()
        return new_file_count

    def _schedule_drain(self):
        if self.is_handling or (self._drain_task is not None and not self._drain_task.done()):
            logger.debug("File drop handler is already busy processing the queue.")
            return
        self._drain_task = asyncio.create_task(self.handle_next_file())

    async def handle_next_file(self):
        """Process queued files one by one until the queue is empty."""
        if self.is_handling:
            logger.info("File drop handler is already busy processing the queue.")
            return

        while self.queue and not self._stop_event.is_set():
            self.current = self.queue.popleft()
            file_path = self.drop_directory / self.current
            logger.info(f"Handling next file from the queue: {file_path}")
            try:
                await self.uploader(file_path)
                file_path.unlink(missing_ok=True)
                self.stats["uploaded"] += 1
            except Exception as e:
                logger.error(f"Something went wrong while uploading file {file_path}: {e}", exc_info=True)
                logger.info("Going to ignore this one and continue processing the queue.")
                self._quarantine(file_path)
                self.stats["failed"] += 1
            finally:
                self.current = None

        if self.queue:
            logger.info(f"Stopped with {len(self.queue)} file(s) left in the queue.")
        else:
            logger.info("Queue is empty. No files to handle at the moment.")

    def _quarantine(self, file_path: Path):
        failure_path = self.failed_directory / file_path.name
        try:
            file_path.replace(failure_path)
            logger.warning(f"Moved {file_path.name} to {self.failed_directory}")
        except OSError as e:
            logger.error(f"Unable to move {file_path} to {failure_path}: {e}")

    async def run(self):
        """Scan at a fixed interval until stop() is called."""
        logger.info(f"Watching {self.drop_directory} every {self.interval_seconds}s")
        self._stop_event.clear()
        while not self._stop_event.is_set():
            try:
                await self.listen()
            except OSError as e:
                logger.error(f"Failed to scan {self.drop_directory}: {e}")
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass
        logger.info(f"Stopped watching {self.drop_directory}")

    def start(self) -> asyncio.Task:
        """Start the scan loop as a background task."""
        if self._loop_task is not None and not self._loop_task.done():
            logger.warning("File drop handler already running, skipping start")
            return self._loop_task
        self._loop_task = asyncio.create_task(self.run())
        return self._loop_task

    async def stop(self):
        """Stop scanning and wait for the file in flight to finish; queued files stay on disk."""
        self._stop_event.set()
        if self._loop_task is not None:
            await self._loop_task
            self._loop_task = None
        if self._drain_task is not None:
            await asyncio.gather(self._drain_task, return_exceptions=True)
            self._drain_task = None

    def status(self) -> Dict:
        """Snapshot of the queue state."""
        return {
            "current": self.current,
            "queue": list(self.queue),
            "is_handling": self.is_handling,
            **self.stats
        }
